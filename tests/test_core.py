from __future__ import annotations

import numpy as np
import pytest

from blockblast.game import BlockBlastGame, ClearEvent, Color, GameConfig, ShapeCatalog, ShapeType

from helpers import board_from_art, make_shape, single_template_catalog


def _snapshot(game: BlockBlastGame):
    return (
        game.board.grid.copy(),
        [s.id for s in game.tray],
        game.score,
        game.is_over,
        game.session.shapes_placed,
    )


def _assert_same(a, b) -> None:
    assert np.array_equal(a[0], b[0])
    assert a[1:] == b[1:]


def test_new_game_starts_playing() -> None:
    game = BlockBlastGame(GameConfig(random_seed=1))
    assert game.board.filled_count() == 0
    assert game.score == 0
    assert not game.is_over
    assert len(game.tray) == 3
    assert game.last_clear is None


def test_config_is_overridable() -> None:
    game = BlockBlastGame(GameConfig(grid_size=10, tray_size=4, random_seed=0))
    assert game.board.size == 10
    assert len(game.tray) == 4


@pytest.mark.parametrize("kwargs", [{"grid_size": 0}, {"tray_size": 0}])
def test_config_rejects_bad_sizes(kwargs) -> None:
    with pytest.raises(ValueError, match="must be >= 1"):
        GameConfig(**kwargs)


def test_full_row_line_scores_and_clears() -> None:
    catalog = single_template_catalog([[1] * 8], kind=ShapeType.LINE4_H, color=Color.RED)
    game = BlockBlastGame(catalog=catalog)
    events = []
    game.add_clear_listener(events.append)

    shape = game.tray[0]
    assert game.place_shape(shape, 0, 0)

    assert game.score == 18
    assert game.last_clear == ClearEvent(rows=(0,), cols=(), color=Color.RED, combo=1, score=10)
    assert events == [game.last_clear]
    assert all(game.board.cell_at(0, c) is None for c in range(8))
    assert game.board.filled_count() == 0
    assert len(game.tray) == 2
    assert shape.id not in {s.id for s in game.tray}


def test_two_rows_and_a_column_make_combo_three() -> None:
    catalog = single_template_catalog([[1], [1]], kind=ShapeType.LINE2_V, color=Color.BLUE)
    game = BlockBlastGame(catalog=catalog)
    game.session.board = board_from_art(
        [
            ".#######",
            ".#######",
            "#.......",
            "#.......",
            "#.......",
            "#....#..",
            "#.......",
            "#.......",
        ]
    )

    assert game.place_shape(game.tray[0], 0, 0)

    event = game.last_clear
    assert event is not None
    assert event.rows == (0, 1)
    assert event.cols == (0,)
    assert event.combo == 3
    assert event.score == 30
    assert event.color == Color.BLUE
    assert game.score == 2 + 30
    assert game.board.filled_count() == 1
    assert game.board.cell_at(5, 5) == Color.RED


def test_placement_without_clear_has_no_event() -> None:
    catalog = single_template_catalog([[1, 1], [1, 1]], kind=ShapeType.SQUARE)
    game = BlockBlastGame(catalog=catalog)
    assert game.place_shape(game.tray[0], 3, 3)
    assert game.score == 4
    assert game.last_clear is None
    assert game.board.cell_at(4, 4) == Color.GREEN


def test_rejected_placement_is_idempotent_noop() -> None:
    game = BlockBlastGame(GameConfig(random_seed=5))
    shape = game.tray[0]
    before = _snapshot(game)
    assert not game.place_shape(shape, 8, 8)
    after_one = _snapshot(game)
    assert not game.place_shape(shape, -1, 0)
    _assert_same(before, after_one)
    _assert_same(before, _snapshot(game))


def test_overlapping_placement_rejected() -> None:
    catalog = single_template_catalog([[1, 1]], kind=ShapeType.LINE2_H)
    game = BlockBlastGame(catalog=catalog)
    assert game.place_shape(game.tray[0], 0, 0)
    before = _snapshot(game)
    assert not game.place_shape(game.tray[0], 0, 1)
    _assert_same(before, _snapshot(game))


def test_shape_not_in_tray_is_rejected() -> None:
    game = BlockBlastGame(GameConfig(random_seed=2))
    stranger = make_shape([[1]], shape_id="not-in-tray")
    assert game.can_place(stranger, 0, 0)
    before = _snapshot(game)
    assert not game.place_shape(stranger, 0, 0)
    _assert_same(before, _snapshot(game))


def test_tray_refills_only_when_empty() -> None:
    catalog = single_template_catalog([[1]])
    game = BlockBlastGame(catalog=catalog)
    first_ids = {s.id for s in game.tray}

    assert game.place_shape(game.tray[0], 0, 0)
    assert len(game.tray) == 2
    assert game.place_shape(game.tray[0], 0, 2)
    assert len(game.tray) == 1
    stale = game.tray[0]
    assert game.place_shape(stale, 0, 4)

    assert len(game.tray) == 3
    assert first_ids.isdisjoint(s.id for s in game.tray)
    # A shape captured before the refill is no longer placeable.
    assert not game.place_shape(stale, 5, 5)


def test_tray_order_is_preserved_on_removal() -> None:
    game = BlockBlastGame(GameConfig(random_seed=11))
    ids = [s.id for s in game.tray]
    middle = game.tray[1]
    row, col = next((r, c) for r in range(8) for c in range(8) if game.can_place(middle, r, c))
    assert game.place_shape(middle, row, col)
    assert [s.id for s in game.tray] == [ids[0], ids[2]]


GAME_OVER_BOARD = [
    "..#####.",
    "..##.###",
    "##.#####",
    "###.####",
    ".###.###",
    "#####.##",
    "#.####.#",
    "#######.",
]


def test_last_fitting_square_ends_the_game() -> None:
    catalog = single_template_catalog([[1, 1], [1, 1]], kind=ShapeType.SQUARE, color=Color.ORANGE)
    game = BlockBlastGame(catalog=catalog)
    game.session.board = board_from_art(GAME_OVER_BOARD)
    sessions = []
    game.add_game_over_listener(sessions.append)
    assert not game.check_game_over()

    assert game.place_shape(game.tray[0], 0, 0)

    assert game.last_clear is None
    assert game.is_over
    assert sessions == [game.session]
    assert len(game.tray) == 2
    before = _snapshot(game)
    assert not game.place_shape(game.tray[0], 0, 0)
    _assert_same(before, _snapshot(game))


def test_single_in_tray_keeps_game_alive() -> None:
    catalog = ShapeCatalog(seed=0)
    game = BlockBlastGame(catalog=catalog)
    board = board_from_art(GAME_OVER_BOARD)
    square = catalog.make_shape(catalog.template_for(ShapeType.SQUARE))
    single = catalog.make_shape(catalog.template_for(ShapeType.SINGLE))
    game.session.board = board
    game.session.tray = [square, single]

    assert game.place_shape(square, 0, 0)
    # The single still fits in any isolated hole.
    assert not game.is_over
    assert [s.id for s in game.tray] == [single.id]


def test_reset_restores_fresh_session() -> None:
    game = BlockBlastGame(GameConfig(random_seed=4))
    old_ids = set()
    for _ in range(5):
        old_ids |= {s.id for s in game.tray}
        slot, row, col = game.get_valid_actions()[0]
        assert game.place_shape(game.tray[slot], row, col)
    assert game.score > 0

    game.reset()

    assert game.board.filled_count() == 0
    assert game.score == 0
    assert not game.is_over
    assert len(game.tray) == 3
    assert old_ids.isdisjoint(s.id for s in game.tray)
    assert game.last_clear is None


def test_reset_from_over_state() -> None:
    catalog = single_template_catalog([[1, 1], [1, 1]], kind=ShapeType.SQUARE)
    game = BlockBlastGame(catalog=catalog)
    game.session.board = board_from_art(GAME_OVER_BOARD)
    assert game.place_shape(game.tray[0], 0, 0)
    assert game.is_over

    game.reset()
    assert not game.is_over
    assert game.place_shape(game.tray[0], 0, 0)


def test_score_accumulates_per_placement_until_over() -> None:
    game = BlockBlastGame(GameConfig(random_seed=123))
    rng = np.random.default_rng(123)
    for _ in range(200):
        if game.is_over:
            break
        actions = game.get_valid_actions()
        assert actions
        slot, row, col = actions[int(rng.integers(len(actions)))]
        shape = game.tray[slot]
        before = game.score
        assert game.place_shape(shape, row, col)
        combo = game.last_clear.combo if game.last_clear is not None else 0
        assert game.score == before + shape.size + combo * 10
        assert 1 <= len(game.tray) <= 3
        if game.last_clear is not None:
            for r in game.last_clear.rows:
                assert all(game.board.cell_at(r, c) is None for c in range(8))
            for c in game.last_clear.cols:
                assert all(game.board.cell_at(r, c) is None for r in range(8))
    if game.is_over:
        assert game.get_valid_actions() == []
        assert game.check_game_over()


def test_same_seed_plays_identically() -> None:
    def play(seed: int):
        game = BlockBlastGame(GameConfig(random_seed=seed))
        history = []
        for _ in range(30):
            if game.is_over:
                break
            slot, row, col = game.get_valid_actions()[0]
            game.place_shape(game.tray[slot], row, col)
            history.append((game.score, tuple(int(s.kind) for s in game.tray)))
        return history

    assert play(9) == play(9)


def test_state_and_stats_snapshots() -> None:
    catalog = single_template_catalog([[1] * 8], kind=ShapeType.LINE4_H)
    game = BlockBlastGame(catalog=catalog)
    game.place_shape(game.tray[0], 0, 0)
    game.place_shape(game.tray[0], 3, 0)

    state = game.get_state()
    assert state["score"] == 36
    assert state["is_over"] is False
    assert state["tray"] == [int(ShapeType.LINE4_H)]
    assert state["filled_ratio"] == 0.0
    state["grid"][0, 0] = 1
    assert game.board.cell_at(0, 0) is None

    stats = game.get_game_stats()
    assert stats["shapes_placed"] == 2
    assert stats["lines_cleared"] == 2
    assert stats["avg_score_per_shape"] == 18.0


def test_new_session_with_nothing_placeable_starts_over() -> None:
    catalog = single_template_catalog([[1, 1, 1]], kind=ShapeType.LINE3_H)
    game = BlockBlastGame(GameConfig(grid_size=2), catalog=catalog)

    assert game.is_over
    assert game.is_over == game.check_game_over()
    assert game.get_valid_actions() == []
    assert not game.place_shape(game.tray[0], 0, 0)

    game.reset()
    assert game.is_over
    assert len(game.tray) == 3


def test_new_session_on_small_board_with_fitting_shape_plays() -> None:
    catalog = single_template_catalog([[1, 1]], kind=ShapeType.LINE2_H)
    game = BlockBlastGame(GameConfig(grid_size=2), catalog=catalog)
    assert not game.is_over
    # Filling the top row clears it, so the 2x2 board never jams.
    assert game.place_shape(game.tray[0], 0, 0)
    assert game.score == 2 + 10
    assert not game.is_over
