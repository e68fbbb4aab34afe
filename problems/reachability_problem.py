from collections import deque

from env.constants import WALL, GATE, GHOST_HOUSE, UP, DOWN, LEFT, RIGHT, DELTAS

# Tiles que o jogador nunca atravessa, independente do estado do portão
BLOCKING = (WALL, GATE, GHOST_HOUSE)


# ======================================================================
#  ESPECIFICAÇÃO FORMAL DO PROBLEMA (Mapeamento em Grid)
# ======================================================================
class BoardGridProblem:
    """
    The board seen as a search space of (row, col) states.

    Only the player's terrain rules apply: walls, gates and ghost-house tiles
    are never entered. Leaving the grid sideways wraps to the other edge
    (tunnel), leaving it vertically is not a move.
    """
    def __init__(self, initial, tiles):
        self.initial = initial
        self.tiles = tiles
        self.rows = len(tiles)
        self.cols = len(tiles[0]) if tiles else 0

    def walkable(self, r, c):
        if r < 0 or r >= self.rows or c < 0 or c >= len(self.tiles[r]):
            return False
        return self.tiles[r][c] not in BLOCKING

    def actions(self, state):
        r, c = state
        possible = []
        for action in (UP, DOWN, LEFT, RIGHT):
            nr, nc = self.result(state, action)
            if self.walkable(nr, nc):
                possible.append(action)
        return possible

    def result(self, state, action):
        r, c = state
        dr, dc = DELTAS[action]
        # Grid sem colunas: nada para onde dar a volta
        if self.cols == 0:
            return r + dr, c + dc
        # Regra do Túnel nas bordas do mapa
        return r + dr, (c + dc) % self.cols


def breadth_first_reachable(problem):
    """Every state reachable from ``problem.initial`` (the start included)."""
    start = problem.initial
    visited = {start}
    frontier = deque([start])
    while frontier:
        state = frontier.popleft()
        for action in problem.actions(state):
            nxt = problem.result(state, action)
            if nxt not in visited:
                visited.add(nxt)
                frontier.append(nxt)
    return visited
