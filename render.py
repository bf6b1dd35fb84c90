"""
Corte 2D da grade para imagem.

Só lê a grade por HeatGrid.read; a gravação fica com o Pillow.
"""
import numpy as np
from PIL import Image

TEMP_MAX_COR = 100.0


def temperature_to_color(temp):
    # Escala linear azul -> vermelho, limitada a [0, 100]
    temp = min(TEMP_MAX_COR, max(0.0, temp))
    color_value = int(255 * (temp / TEMP_MAX_COR))
    return color_value, 0, 255 - color_value


def slice_to_rgb(grid, axis=2, index=None):
    """
    Amostra um plano perpendicular a ``axis`` (meio da grade por padrão).

    Retorna um array uint8 (linhas, colunas, 3): as colunas seguem o primeiro
    eixo livre e as linhas o segundo, como num bitmap (x, y) para axis=2.
    """
    sizes = [grid.size_x, grid.size_y, grid.size_z]
    if axis not in (0, 1, 2):
        raise ValueError(f"axis deve ser 0, 1 ou 2 (recebido {axis})")
    if index is None:
        index = sizes[axis] // 2

    free_axes = [a for a in range(3) if a != axis]
    cols, rows = sizes[free_axes[0]], sizes[free_axes[1]]
    image = np.zeros((rows, cols, 3), dtype=np.uint8)

    for col in range(cols):
        for row in range(rows):
            coords = [0, 0, 0]
            coords[axis] = index
            coords[free_axes[0]] = col
            coords[free_axes[1]] = row
            image[row, col] = temperature_to_color(grid.read(*coords))

    return image


def save_image(rgb, file_name):
    # Formato definido pela extensão (png, bmp, ...)
    Image.fromarray(np.ascontiguousarray(rgb, dtype=np.uint8)).save(file_name)
