import pygame

CELL_SIZE = 100
MARGIN = 10
STATUS_HEIGHT = 60
BACKGROUND_COLOR = (30, 30, 30)
LINE_COLOR = (200, 200, 200)
TEXT_COLOR = (230, 230, 230)
HINT_COLOR = (110, 110, 110)
X_COLOR = (255, 0, 0)
O_COLOR = (0, 0, 255)
LINE_WIDTH = 5


def init_display():
    width = 3 * CELL_SIZE + 2 * MARGIN
    height = 3 * CELL_SIZE + 2 * MARGIN + STATUS_HEIGHT
    pygame.init()
    screen = pygame.display.set_mode((width, height))
    pygame.display.set_caption("Tic Tac Toe")
    return screen


def cell_at(pos):
    """Board cell under a pixel position, or ``None`` outside the grid."""
    x, y = pos
    c = (x - MARGIN) // CELL_SIZE
    r = (y - MARGIN) // CELL_SIZE
    if 0 <= r < 3 and 0 <= c < 3:
        return 3 * r + c
    return None


def draw_board(screen, board, status="", detail="", show_hints=False):
    screen.fill(BACKGROUND_COLOR)

    # grid lines
    for i in range(1, 3):
        y = MARGIN + i * CELL_SIZE
        pygame.draw.line(screen, LINE_COLOR, (MARGIN, y), (MARGIN + 3 * CELL_SIZE, y), LINE_WIDTH)
        x = MARGIN + i * CELL_SIZE
        pygame.draw.line(screen, LINE_COLOR, (x, MARGIN), (x, MARGIN + 3 * CELL_SIZE), LINE_WIDTH)

    font = pygame.font.SysFont(None, 28)
    for index, piece in enumerate(board):
        r, c = divmod(index, 3)
        cx = MARGIN + c * CELL_SIZE + CELL_SIZE // 2
        cy = MARGIN + r * CELL_SIZE + CELL_SIZE // 2
        if piece == "X":
            off = CELL_SIZE // 3
            pygame.draw.line(screen, X_COLOR, (cx - off, cy - off), (cx + off, cy + off), LINE_WIDTH)
            pygame.draw.line(screen, X_COLOR, (cx + off, cy - off), (cx - off, cy + off), LINE_WIDTH)
        elif piece == "O":
            pygame.draw.circle(screen, O_COLOR, (cx, cy), CELL_SIZE // 3, LINE_WIDTH)
        elif show_hints:
            # 1-based cell numbers on empty squares
            hint = font.render(str(index + 1), True, HINT_COLOR)
            screen.blit(hint, hint.get_rect(center=(cx, cy)))

    top = 2 * MARGIN + 3 * CELL_SIZE
    screen.blit(font.render(status, True, TEXT_COLOR), (MARGIN, top))
    if detail:
        small = pygame.font.SysFont(None, 20)
        screen.blit(small.render(detail, True, HINT_COLOR), (MARGIN, top + 28))

    pygame.display.flip()
