"""
Estado da grade 3D de temperatura.

Guarda os dois buffers (atual e próximo), os parâmetros físicos e aplica a
política de contorno de Dirichlet na construção.
"""
import logging
from collections import namedtuple

import numpy as np

logger = logging.getLogger(__name__)

BOUNDARY_TEMP = 300.0
SOURCE_TEMP = 100.0
INTERIOR_TEMP = 0.0


# ---------------------------------------------------------------------------
# Parâmetros da simulação
# ---------------------------------------------------------------------------

SimulationParams = namedtuple(
    'SimulationParams',
    ['size_x', 'size_y', 'size_z', 'alpha', 'dx', 'dy', 'dz', 'dt', 'steps'],
    defaults=[100, 100, 100, 0.5, 1.0, 1.0, 1.0, 0.1, 1000],
)

DEFAULT_PARAMS = SimulationParams()


def stability_factor(alpha, dt, dx, dy, dz):
    """
    alpha*dt*(1/dx² + 1/dy² + 1/dz²). O esquema explícito 3D só é estável
    com valor <= 1/6. Apenas informativo: o motor não age sobre esse valor.
    """
    return alpha * dt * (1.0 / dx ** 2 + 1.0 / dy ** 2 + 1.0 / dz ** 2)


# ---------------------------------------------------------------------------
# Erros
# ---------------------------------------------------------------------------

class HeatSimulationError(Exception):
    """Base de todos os erros do motor de simulação."""


class InvalidDimensionError(HeatSimulationError, ValueError):
    pass


class InvalidStepCountError(HeatSimulationError, ValueError):
    pass


class OutOfRangeAccessError(HeatSimulationError, IndexError):
    pass


# ---------------------------------------------------------------------------
# Condição inicial / contorno
# ---------------------------------------------------------------------------

def initialize_grid(size_x, size_y, size_z, out=None):
    """
    Aplica a política de contorno na matriz (size_x, size_y, size_z).

    - Faces x = size_x-1, y = 0, y = size_y-1, z = 0, z = size_z-1: 300.0
    - Face x = 0 (fora das faces acima): 100.0
    - Interior: 0.0
    """
    if out is None:
        out = np.empty((size_x, size_y, size_z), dtype=np.float64)

    out.fill(INTERIOR_TEMP)
    out[0, :, :] = SOURCE_TEMP

    # As faces de 300 têm prioridade sobre a face x = 0
    out[-1, :, :] = BOUNDARY_TEMP
    out[:, 0, :] = BOUNDARY_TEMP
    out[:, -1, :] = BOUNDARY_TEMP
    out[:, :, 0] = BOUNDARY_TEMP
    out[:, :, -1] = BOUNDARY_TEMP
    return out


# ---------------------------------------------------------------------------
# Grade
# ---------------------------------------------------------------------------

class HeatGrid:
    """
    Dono dos buffers ``current_grid`` e ``next_grid``.

    Os escalonadores leem de ``current_grid``, escrevem o interior de
    ``next_grid`` e depois copiam esse interior de volta. Células de contorno
    nunca são escritas depois da construção.

    Não há verificação de estabilidade: com
    ``alpha*dt*(1/dx² + 1/dy² + 1/dz²) > 1/6`` os valores divergem sem erro.
    """

    def __init__(self, size_x=100, size_y=100, size_z=100, alpha=0.5,
                 dx=1.0, dy=1.0, dz=1.0, dt=0.1, steps=1000):
        # Validação antes de qualquer alocação
        for name, value in (('size_x', size_x), ('size_y', size_y), ('size_z', size_z)):
            if value < 1:
                raise InvalidDimensionError(f"{name} deve ser >= 1 (recebido {value})")
        if steps < 0:
            raise InvalidStepCountError(f"steps deve ser >= 0 (recebido {steps})")

        self.size_x = int(size_x)
        self.size_y = int(size_y)
        self.size_z = int(size_z)
        self.alpha = float(alpha)
        self.dx = float(dx)
        self.dy = float(dy)
        self.dz = float(dz)
        self.dt = float(dt)
        self.steps = int(steps)

        shape = (self.size_x, self.size_y, self.size_z)
        self.current_grid = initialize_grid(*shape)
        self.next_grid = np.zeros(shape, dtype=np.float64)

        logger.debug("Grade %dx%dx%d criada (steps=%d)", *shape, self.steps)

    @classmethod
    def from_params(cls, params):
        return cls(*params)

    @property
    def shape(self):
        return self.current_grid.shape

    @property
    def has_interior(self):
        return min(self.size_x, self.size_y, self.size_z) >= 3

    def interior_range(self):
        """Intervalo semiaberto das linhas x internas."""
        if not self.has_interior:
            return 1, 1
        return 1, self.size_x - 1

    def read(self, x, y, z):
        for coord, size in ((x, self.size_x), (y, self.size_y), (z, self.size_z)):
            if not 0 <= coord < size:
                raise OutOfRangeAccessError(
                    f"({x}, {y}, {z}) fora da grade {self.size_x}x{self.size_y}x{self.size_z}"
                )
        return float(self.current_grid[x, y, z])

    def reset(self):
        """Volta ao estado inicial (contorno + interior zerado)."""
        initialize_grid(self.size_x, self.size_y, self.size_z, out=self.current_grid)
        self.next_grid.fill(0.0)

    def snapshot(self):
        return self.current_grid.copy()

    def stability_factor(self):
        return stability_factor(self.alpha, self.dt, self.dx, self.dy, self.dz)

    def __repr__(self):
        return (f"HeatGrid(size=({self.size_x}, {self.size_y}, {self.size_z}), "
                f"alpha={self.alpha}, dt={self.dt}, steps={self.steps})")
