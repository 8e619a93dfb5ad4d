"""
Minesweeper Solver - Interactive Demo

Run with: streamlit run app/demo.py
"""

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import numpy as np
import streamlit as st
from typing import Any, Dict, List, Optional, Tuple

from localsweep import Minesweeper, MinesweeperSolver, SolveOutcome

COLORS = {
    "0": "#cccccc",
    "1": "#0000ff",
    "2": "#008000",
    "3": "#ff0000",
    "4": "#000080",
    "5": "#800000",
    "6": "#008080",
    "7": "#000000",
    "8": "#808080",
}

METHOD_LABELS = {
    "safe": "Deduced Safe",
    "low_probability": "Lowest Probability Guess",
    "fallback": "Random Fallback Guess",
}


def _cell_size(grid_size: int) -> Tuple[int, str]:
    # Scale cell size based on board size
    if grid_size >= 25:
        return 16, "11px"
    if grid_size >= 16:
        return 20, "13px"
    return 26, "15px"


def render_board_html(
    board_view: np.ndarray,
    mine_marks: np.ndarray,
    mines: Optional[frozenset] = None,
    highlight_cell: Optional[Tuple[int, int]] = None,
) -> str:
    """
    Render a board view as an HTML table.

    Args:
        board_view: Visible board (-1 = covered, else neighbor mine count).
        mine_marks: Cells the solver marked as mines.
        mines: Ground-truth mine positions to show once the game is over.
        highlight_cell: Cell to outline (the latest move).
    """
    grid_size = board_view.shape[0]
    cell_size, font_size = _cell_size(grid_size)

    html = '<div style="font-family: monospace; line-height: 1.2;">'
    html += '<table style="border-collapse: collapse; margin: auto;">'

    for x in range(grid_size):
        html += "<tr>"
        for y in range(grid_size):
            value = int(board_view[x, y])
            is_mine = mines is not None and (x, y) in mines

            if value >= 0 and is_mine:
                cell = "M"  # Hit mine (caused loss)
                bg = "#ff0000"
                text_color = "#ffffff"
            elif mine_marks[x, y]:
                cell = "F"  # Marked by solver
                bg = "#ffa500"
                text_color = "#ffffff"
            elif value >= 0:
                cell = str(value)
                bg = "#f0f0f0" if cell == "0" else "#ffffff"
                text_color = COLORS.get(cell, "#000000")
            elif is_mine:
                cell = "M"  # Mine (revealed at end)
                bg = "#ffcccc"
                text_color = "#ff0000"
            else:
                cell = "."
                bg = "#c0c0c0"
                text_color = "#666666"

            border = "2px solid #ff0000" if (x, y) == highlight_cell else "1px solid #999"
            display = cell if cell != "0" else " "

            html += f'''<td style="
                width: {cell_size}px; height: {cell_size}px;
                text-align: center;
                background: {bg};
                border: {border};
                color: {text_color};
                font-weight: bold;
                font-size: {font_size};
            ">{display}</td>'''
        html += "</tr>"

    html += "</table></div>"
    return html


def _new_game(grid_size: int, mines: int, seed: Optional[int]) -> None:
    game = Minesweeper(grid_size, mines, seed=seed)
    st.session_state.game = game
    st.session_state.solver = MinesweeperSolver(
        game, seed=None if seed is None else seed + 1, record_steps=True
    )
    st.session_state.current_step = 0


def main():
    st.set_page_config(
        page_title="Minesweeper Solver",
        page_icon="💣",
        layout="wide",
    )

    st.title("Minesweeper Solver")
    st.markdown("""
    A solver that plays Minesweeper with local constraint deduction and
    greedy probability guessing.
    """)

    # Sidebar configuration
    st.sidebar.header("Game Configuration")
    preset = st.sidebar.selectbox(
        "Preset",
        ["Small (8x8, 6)", "Medium (10x10, 10)", "Large (16x16, 40)", "Custom"],
        index=1,
    )
    if preset == "Small (8x8, 6)":
        grid_size, mines = 8, 6
    elif preset == "Medium (10x10, 10)":
        grid_size, mines = 10, 10
    elif preset == "Large (16x16, 40)":
        grid_size, mines = 16, 40
    else:
        grid_size = st.sidebar.slider("Grid size", 3, 30, 10)
        mines = st.sidebar.slider("Mines", 0, grid_size * grid_size - 1, min(10, grid_size * grid_size - 1))

    seed_text = st.sidebar.text_input("Seed (blank for random)", "")
    seed: Optional[int] = int(seed_text) if seed_text.strip().isdigit() else None

    current_settings = (grid_size, mines, seed)
    if st.session_state.get("prev_settings") != current_settings:
        _new_game(grid_size, mines, seed)
        st.session_state.prev_settings = current_settings

    game: Minesweeper = st.session_state.game
    solver: MinesweeperSolver = st.session_state.solver

    col1, col2 = st.columns([3, 1])

    with col1:
        st.subheader("Game Board")
        btn_col1, btn_col2, btn_col3 = st.columns(3)
        with btn_col1:
            if st.button("New Board", type="primary"):
                _new_game(grid_size, mines, seed)
                st.rerun()
        with btn_col2:
            if st.button("Step", disabled=solver.outcome is not None):
                solver.step()
                st.session_state.current_step = max(len(solver.steps_history) - 1, 0)
                st.rerun()
        with btn_col3:
            if st.button("Solve", disabled=solver.outcome is not None):
                solver.solve()
                st.session_state.current_step = max(len(solver.steps_history) - 1, 0)
                st.rerun()

        steps_history: List[Dict[str, Any]] = solver.steps_history
        finished = solver.outcome is not None
        mines_to_show = game.mine_positions() if finished else None

        if steps_history:
            total_steps = len(steps_history)
            if total_steps > 1:
                step_display = st.slider(
                    "Move", 1, total_steps, st.session_state.current_step + 1
                )
                st.session_state.current_step = step_display - 1
            data = steps_history[st.session_state.current_step]
            cx, cy = data["cell"]
            st.info(
                f"**Move {st.session_state.current_step + 1}/{total_steps}**: "
                f"uncover ({cx}, {cy}) via *{METHOD_LABELS[data['method']]}*"
            )
            html = render_board_html(
                data["board_snapshot"],
                data["mine_marks"],
                mines=mines_to_show,
                highlight_cell=data["cell"],
            )
        else:
            html = render_board_html(game.snapshot(), solver.mine_marks)

        st.markdown(html, unsafe_allow_html=True)

        if solver.outcome is SolveOutcome.WON:
            st.success("Solved! All safe cells uncovered.")
        elif solver.outcome is SolveOutcome.LOST:
            st.error("Game Over! Hit a mine.")
        elif solver.outcome is SolveOutcome.STALLED:
            st.warning("Solver stalled: no candidate move.")

    with col2:
        st.subheader("Solver Statistics")
        payload = solver.metrics()
        result = solver.outcome.value.title() if solver.outcome else "In progress"
        metrics: List[Tuple[str, Any]] = [
            ("Result", result),
            ("Moves", payload["reveal_moves_count"]),
            ("Cells Uncovered", payload["revealed_cells_count"]),
            ("Mines Marked", payload["markings_count"]),
        ]
        for label, value in metrics:
            st.metric(label, value)

        st.markdown("---")
        st.text(f"Safe deductions: {payload['inferred_safe_count']}")
        st.text(f"Mine deductions: {payload['inferred_mine_count']}")
        st.text(f"Probability guesses: {payload['probability_guesses_count']}")
        st.text(f"Fallback guesses: {payload['fallback_guesses_count']}")


if __name__ == "__main__":
    main()
