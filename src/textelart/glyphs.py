# Solid full block: U+2588, fills the whole cell with the foreground colour
FULL_BLOCK = "█"

# Placeholder cell used before an image has been sampled
EMPTY = " "
EMPTY_COLOUR = (0, 0, 0)

# Cover art size in cells, roughly square on a terminal with 2:1 cells
DEFAULT_WIDTH = 45
DEFAULT_HEIGHT = 20

DEFAULT_BACKGROUND = (255, 255, 255)
