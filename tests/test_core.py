import numpy as np
import pytest

from blockfall.game import BlockfallGame, Command, GameConfig, GamePhase, TetrominoType


def test_initial_state_is_idle(game):
    assert game.phase is GamePhase.IDLE
    assert game.active is None
    assert game.next_piece is None
    assert game.score == 0


def test_start_spawns_piece_and_primes_buffer(game):
    assert game.start()
    assert game.phase is GamePhase.RUNNING
    assert game.active is not None
    assert game.next_piece is not None
    assert game.active.y == 0
    assert len(game.scheduler.pending) == 1


def test_start_while_running_or_paused_is_noop(game):
    game.start()
    piece = game.active
    assert not game.start()
    assert game.active is piece
    game.pause()
    assert not game.start()
    assert game.phase is GamePhase.PAUSED


def test_commands_ignored_unless_running(make_game):
    game = make_game(TetrominoType.T)
    for command in Command:
        assert not game.handle_command(command)
    game.start()
    game.pause()
    x, y = game.active.x, game.active.y
    for command in Command:
        assert not game.handle_command(command)
    assert (game.active.x, game.active.y) == (x, y)


def test_move_left_right_and_soft_drop(make_game):
    game = make_game(TetrominoType.T)
    game.start()
    assert game.move_left()
    assert game.active.x == 3
    assert game.move_right()
    assert game.move_right()
    assert game.active.x == 5
    assert game.soft_drop()
    assert game.active.y == 1


def test_moves_stop_at_walls(make_game):
    game = make_game(TetrominoType.O)
    game.start()
    while game.move_left():
        pass
    assert game.active.x == 0
    assert not game.move_left()
    while game.move_right():
        pass
    assert game.active.x == 8


def test_soft_drop_never_locks(make_game):
    game = make_game(TetrominoType.O)
    game.start()
    while game.soft_drop():
        pass
    assert game.active.y == 18
    assert not game.soft_drop()
    assert not np.any(game.board.grid)


def test_rotate_applies_when_free(make_game):
    game = make_game(TetrominoType.I)
    game.start()
    game.soft_drop()
    assert game.rotate()
    assert game.active.shape.shape == (4, 1)


def test_rotate_rejected_on_collision(make_game):
    game = make_game(TetrominoType.I)
    game.start()
    while game.soft_drop():
        pass
    # vertical I would cross the floor
    assert not game.rotate()
    assert game.active.shape.shape == (1, 4)


def test_rotate_o_piece_keeps_shape(make_game):
    game = make_game(TetrominoType.O)
    game.start()
    before = game.active.shape.copy()
    game.rotate()
    assert np.array_equal(game.active.shape, before)


def test_tick_moves_piece_down_every_interval(make_game):
    game = make_game(TetrominoType.T)
    game.start()
    game.advance(999)
    assert game.active.y == 0
    game.advance(1)
    assert game.active.y == 1
    game.advance(3000)
    assert game.active.y == 4


def test_tick_at_row_five_on_empty_board(make_game):
    game = make_game(TetrominoType.T)
    game.start()
    game.active.y = 5
    assert game.tick()
    assert game.active.y == 6


def test_i_piece_drop_locks_on_bottom_row(make_game):
    game = make_game(TetrominoType.I)
    game.start()
    while game.soft_drop():
        pass
    game.tick()

    bottom = game.board.grid[19]
    i_color = int(TetrominoType.I)
    assert [int(v) for v in bottom] == [0, 0, 0, i_color, i_color, i_color, i_color, 0, 0, 0]
    assert np.count_nonzero(game.board.grid[:19]) == 0
    assert game.score == 0
    assert game.phase is GamePhase.RUNNING
    assert game.active.y == 0


def test_two_row_clear_scores_twenty(make_game, fill_row):
    game = make_game(TetrominoType.O)
    game.start()
    fill_row(game, 18, skip=(4, 5))
    fill_row(game, 19, skip=(4, 5))
    game.advance(18 * 1000)
    assert game.active.y == 18
    game.advance(1000)

    assert game.score == 20
    assert game.state.lines_cleared == 2
    assert not np.any(game.board.grid)


def test_spawn_collision_ends_game(make_game):
    game = make_game(TetrominoType.O)
    scores = []
    game.on_game_over = scores.append
    game.start()
    game.board.grid[2:, 4:6] = int(TetrominoType.T)

    game.tick()
    assert game.phase is GamePhase.GAME_OVER
    assert game.active is None
    assert scores == [0]
    assert game.scheduler.pending == []

    frozen = game.board.clone_state()
    assert not game.tick()
    game.advance(10_000)
    assert np.array_equal(game.board.grid, frozen)
    assert not game.move_left()
    assert not game.pause()


def test_start_after_game_over_resets(make_game):
    game = make_game(TetrominoType.O)
    game.start()
    game.board.grid[2:, 4:6] = int(TetrominoType.T)
    game.state.score = 50
    game.tick()
    assert game.phase is GamePhase.GAME_OVER

    assert game.start()
    assert game.phase is GamePhase.RUNNING
    assert game.score == 0
    assert not np.any(game.board.grid)


def test_pause_discards_partial_tick(make_game):
    game = make_game(TetrominoType.T)
    game.start()
    game.advance(900)
    assert game.pause()
    assert game.phase is GamePhase.PAUSED
    game.advance(5000)
    assert game.active.y == 0

    assert game.pause()
    assert game.phase is GamePhase.RUNNING
    game.advance(999)
    assert game.active.y == 0
    game.advance(1)
    assert game.active.y == 1


def test_resume_only_from_paused(game):
    assert not game.resume()
    game.start()
    assert not game.resume()
    game.toggle_pause()
    assert game.resume()
    assert game.phase is GamePhase.RUNNING


def test_pause_ignored_when_idle(game):
    assert not game.pause()
    assert game.phase is GamePhase.IDLE


@pytest.mark.parametrize("setup", ["idle", "running", "paused", "over"])
def test_restart_from_any_phase(make_game, setup):
    game = make_game(TetrominoType.O)
    if setup != "idle":
        game.start()
    if setup == "paused":
        game.pause()
    if setup == "over":
        game.board.grid[2:, 4:6] = int(TetrominoType.T)
        game.tick()
        assert game.phase is GamePhase.GAME_OVER

    assert game.restart()
    assert game.phase is GamePhase.RUNNING
    assert game.score == 0
    assert not np.any(game.board.grid)
    assert len(game.scheduler.pending) == 1


def test_restart_never_doubles_tick_stream(make_game):
    game = make_game(TetrominoType.T)
    game.start()
    game.restart()
    game.restart()
    game.advance(1000)
    assert game.active.y == 1


def test_render_listener_sees_ticks_and_moves(make_game):
    game = make_game(TetrominoType.T)
    frames = []
    game.on_render = frames.append
    game.start()
    game.move_left()
    game.advance(1000)
    assert len(frames) == 3
    last = frames[-1]
    assert last.phase is GamePhase.RUNNING
    assert sorted(last.active_cells) == sorted((c, r, int(TetrominoType.T)) for c, r in game.active.cells())


def test_rejected_move_does_not_render(make_game):
    game = make_game(TetrominoType.O)
    game.start()
    while game.move_left():
        pass
    frames = []
    game.on_render = frames.append
    game.move_left()
    assert frames == []


def test_get_state_overlays_active_piece(make_game):
    game = make_game(TetrominoType.O)
    game.start()
    game.board.set_cell(19, 0, 3)
    state = game.get_state()
    assert state[19, 0] == 3
    assert state[0, 4] == -int(TetrominoType.O)
    assert game.board.get_cell(0, 4) == 0


def test_next_piece_becomes_active(make_game):
    game = make_game(TetrominoType.I, TetrominoType.O, TetrominoType.T)
    game.start()
    assert game.active.kind is TetrominoType.I
    assert game.next_piece.kind is TetrominoType.O
    while game.soft_drop():
        pass
    game.tick()
    assert game.active.kind is TetrominoType.O
    assert game.next_piece.kind is TetrominoType.T


def test_config_validation():
    with pytest.raises(ValueError):
        GameConfig(tick_interval_ms=0)
    with pytest.raises(ValueError):
        GameConfig(rows=-1)


def test_custom_tick_interval():
    game = BlockfallGame(GameConfig(tick_interval_ms=250, random_seed=3))
    game.start()
    game.advance(1000)
    assert game.active.y == 4
