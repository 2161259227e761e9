import random
import unittest
from collections import Counter

from catan_randomizer.domain.board import BoardTemplate, CatanBoard, HexTemplate, build_board
from catan_randomizer.domain.expansions import BASE_GAME, EXTENSION_5_6, get_board
from catan_randomizer.domain.hexes import Hex, HexType, Orientation, Port, PortType, clone_layout
from catan_randomizer.shuffle.engine import (
    NumberShufflingError,
    PortShufflingError,
    generate,
    shuffle,
)
from catan_randomizer.shuffle.types import BinaryConstraints, ShuffleConfig

NO_CONSTRAINTS = BinaryConstraints(
    no_adjacent_six_eight=False,
    no_adjacent_two_twelve=False,
    no_adjacent_pairs=False,
)
SIX_EIGHT_ONLY = BinaryConstraints(
    no_adjacent_six_eight=True,
    no_adjacent_two_twelve=False,
    no_adjacent_pairs=False,
)


def _land(hex_type: HexType, number=None, **kwargs) -> HexTemplate:
    return HexTemplate(type=hex_type, number=number, **kwargs)


def _sea(**kwargs) -> HexTemplate:
    return HexTemplate(type=HexType.SEA, fixed=True, **kwargs)


def _row_board(cells, **kwargs) -> CatanBoard:
    return build_board(BoardTemplate(board=[list(cells)], **kwargs))


def _adjacent_pairs(board: CatanBoard):
    for position, neighbors in enumerate(board.neighbors):
        for neighbor in neighbors.values():
            if neighbor > position:
                yield position, neighbor


def _port_types(hexes):
    return Counter(hex_.port.type for hex_ in hexes if hex_.port is not None)


class StandardBoardShuffleTests(unittest.TestCase):
    def test_layout_keeps_terrain_and_number_counts(self) -> None:
        board = get_board(BASE_GAME)
        hexes = shuffle(board, seed=3)

        self.assertEqual(len(hexes), len(board))
        self.assertEqual(
            Counter(hex_.type for hex_ in hexes),
            Counter(hex_.type for hex_ in board.recommended_layout),
        )
        self.assertEqual(
            Counter(hex_.number for hex_ in hexes),
            Counter(hex_.number for hex_ in board.recommended_layout),
        )
        desert = [hex_ for hex_ in hexes if hex_.type is HexType.DESERT]
        self.assertIsNone(desert[0].number)

    def test_adjacency_constraints_hold_for_every_pair(self) -> None:
        for name in (BASE_GAME, EXTENSION_5_6):
            board = get_board(name)
            for seed in range(8):
                hexes = shuffle(board, BinaryConstraints(), seed=seed)
                for first, second in _adjacent_pairs(board):
                    numbers = {hexes[first].number, hexes[second].number}
                    msg = f"{name} seed {seed}: positions {first} and {second}"
                    if None in numbers:
                        continue
                    self.assertNotEqual(numbers, {6, 8}, msg=msg)
                    self.assertNotEqual(numbers, {2, 12}, msg=msg)
                    self.assertGreater(len(numbers), 1, msg=msg)

    def test_fixed_hexes_and_ports_stay_in_place(self) -> None:
        board = get_board(BASE_GAME)
        for seed in range(5):
            hexes = shuffle(board, seed=seed)
            for hex_, recommended in zip(hexes, board.recommended_layout):
                if not recommended.fixed:
                    continue
                self.assertEqual(hex_.type, recommended.type)
                self.assertEqual(hex_.number, recommended.number)
                self.assertEqual(hex_.port is None, recommended.port is None)
                if recommended.port is not None:
                    self.assertEqual(hex_.port.orientation, recommended.port.orientation)

    def test_port_types_are_permuted_not_changed(self) -> None:
        board = get_board(EXTENSION_5_6)
        hexes = shuffle(board, seed=12)
        self.assertEqual(_port_types(hexes), _port_types(board.recommended_layout))

    def test_board_is_not_modified(self) -> None:
        board = get_board(BASE_GAME)
        before = clone_layout(list(board.recommended_layout))
        shuffle(board, seed=21)
        shuffle(board, seed=22)
        self.assertEqual(list(board.recommended_layout), before)

    def test_same_seed_same_layout(self) -> None:
        board = get_board(BASE_GAME)
        self.assertEqual(shuffle(board, seed=99), shuffle(board, seed=99))
        self.assertEqual(generate(board, rng=random.Random(4)), shuffle(board, rng=random.Random(4)))

    def test_each_phase_logs_its_start(self) -> None:
        with self.assertLogs("catan_randomizer.shuffle.engine", level="DEBUG") as logs:
            shuffle(get_board(BASE_GAME), seed=5)
        messages = [record.getMessage() for record in logs.records]
        self.assertIn("Shuffling terrain on 37 hexes.", messages)
        self.assertIn("Shuffling numbers.", messages)
        self.assertIn("Shuffling ports.", messages)

    def test_layouts_vary_between_seeds(self) -> None:
        board = get_board(BASE_GAME)
        layouts = {tuple((hex_.type, hex_.number) for hex_ in shuffle(board, seed=seed)) for seed in range(5)}
        self.assertGreater(len(layouts), 1)


class TerrainShuffleTests(unittest.TestCase):
    def test_fixed_wheat_six_survives(self) -> None:
        cells = [
            _land(HexType.WOOD, 3),
            _land(HexType.SHEEP, 4),
            _land(HexType.HILLS, 5),
            _land(HexType.MOUNTAIN, 9),
            _land(HexType.WHEAT, 6, fixed=True),
            _land(HexType.WOOD, 10),
            _land(HexType.SHEEP, 11),
            _land(HexType.HILLS, 2),
            _land(HexType.MOUNTAIN, 12),
            _land(HexType.WHEAT, 8),
        ]
        board = _row_board(cells)
        for seed in range(20):
            hexes = shuffle(board, seed=seed)
            self.assertEqual(hexes[4].type, HexType.WHEAT)
            self.assertEqual(hexes[4].number, 6)
            self.assertTrue(hexes[4].fixed)
            self.assertNotIn(hexes[3].number, (6, 8))
            self.assertNotIn(hexes[5].number, (6, 8))

    def test_terrain_only_moves_within_group(self) -> None:
        cells = [
            _land(HexType.WOOD, 3, group=1),
            _land(HexType.MOUNTAIN, 9, group=2),
            _land(HexType.SHEEP, 4, group=1),
            _land(HexType.HILLS, 10, group=2),
            _land(HexType.WHEAT, 5, group=1),
            _land(HexType.DESERT, group=2),
        ]
        board = _row_board(cells)
        for seed in range(10):
            hexes = shuffle(board, NO_CONSTRAINTS, seed=seed)
            self.assertEqual(
                {hexes[position].type for position in (0, 2, 4)},
                {HexType.WOOD, HexType.SHEEP, HexType.WHEAT},
            )
            self.assertEqual(
                {hexes[position].type for position in (1, 3, 5)},
                {HexType.MOUNTAIN, HexType.HILLS, HexType.DESERT},
            )


class NumberShuffleTests(unittest.TestCase):
    def _triangle(self, numbers) -> CatanBoard:
        hexes = tuple(Hex(type=HexType.WHEAT, number=number) for number in numbers)
        neighbors = tuple(
            {direction: other for direction, other in zip(("e", "se"), [i for i in range(len(numbers)) if i != position])}
            for position in range(len(numbers))
        )
        return CatanBoard(recommended_layout=hexes, neighbors=neighbors, max_pips_on_chits=(5,) * len(numbers))

    def test_mutually_adjacent_six_and_eight_fail(self) -> None:
        board = self._triangle([6, 8, 5])
        constraints = BinaryConstraints(no_adjacent_six_eight=True, no_adjacent_two_twelve=False, no_adjacent_pairs=False)
        with self.assertRaises(NumberShufflingError):
            shuffle(board, constraints, seed=1, config=ShuffleConfig(max_retries=25))

    def test_six_and_eight_are_separated_when_possible(self) -> None:
        board = _row_board([_land(HexType.WHEAT, number) for number in (6, 8, 5, 4)])
        constraints = BinaryConstraints(no_adjacent_six_eight=True, no_adjacent_two_twelve=False, no_adjacent_pairs=False)
        for seed in range(15):
            hexes = shuffle(board, constraints, seed=seed)
            for first, second in _adjacent_pairs(board):
                self.assertNotEqual({hexes[first].number, hexes[second].number}, {6, 8})

    def test_zero_retries_fails_after_first_pass(self) -> None:
        board = self._triangle([6, 6, 6])
        with self.assertRaises(NumberShufflingError):
            shuffle(board, seed=2, config=ShuffleConfig(max_retries=0))

    def test_pip_limits_per_type_and_chit(self) -> None:
        # Groups keep the wheat away from the capped position.
        cells = [
            _land(HexType.SHEEP, 4, group=1, max_pips_on_chit=1),
            _land(HexType.SHEEP, 2, group=1),
            _land(HexType.WHEAT, 3, group=2),
            _land(HexType.SHEEP, 8, group=2),
        ]
        board = _row_board(cells, min_pips_on_hex_types={HexType.WHEAT: 5})
        for seed in range(10):
            hexes = shuffle(board, NO_CONSTRAINTS, seed=seed)
            wheat = next(hex_ for hex_ in hexes if hex_.type is HexType.WHEAT)
            self.assertEqual(wheat.number, 8)
            self.assertEqual(hexes[0].number, 2)

    def test_second_numbers_travel_with_first(self) -> None:
        cells = [
            _land(HexType.WOOD, 3, second_number=11),
            _land(HexType.SHEEP, 4),
            _land(HexType.WHEAT, 9),
        ]
        board = _row_board(cells)
        pairs = Counter((hex_.number, hex_.second_number) for hex_ in board.recommended_layout)
        for seed in range(10):
            hexes = shuffle(board, NO_CONSTRAINTS, seed=seed)
            self.assertEqual(Counter((hex_.number, hex_.second_number) for hex_ in hexes), pairs)

    def test_fixed_number_groups_keep_recommended_numbers(self) -> None:
        cells = [
            _land(HexType.WOOD, 3, group=1),
            _land(HexType.SHEEP, 4, group=1),
            _land(HexType.WHEAT, 9, group=2),
            _land(HexType.HILLS, 10, group=2),
            _land(HexType.MOUNTAIN, 11, group=2),
        ]
        board = _row_board(cells, fix_numbers_in_groups=[1])
        for seed in range(10):
            hexes = shuffle(board, NO_CONSTRAINTS, seed=seed)
            self.assertEqual([hexes[0].number, hexes[1].number], [3, 4])
            self.assertEqual(sorted(hex_.number for hex_ in hexes[2:]), [9, 10, 11])

    def test_fixed_number_group_blocks_lower_neighbor(self) -> None:
        cells = [
            _land(HexType.WOOD, 6, group=1),
            _land(HexType.SHEEP, 8, group=2),
            _land(HexType.WHEAT, 3, group=2),
            _land(HexType.HILLS, 4, group=2),
        ]
        board = _row_board(cells, fix_numbers_in_groups=[1])
        for seed in range(30):
            hexes = shuffle(board, SIX_EIGHT_ONLY, seed=seed)
            self.assertEqual(hexes[0].number, 6)
            self.assertNotIn(hexes[1].number, (6, 8))
            self.assertEqual(sorted(hex_.number for hex_ in hexes[1:]), [3, 4, 8])

    def test_fixed_hex_number_blocks_lower_neighbor(self) -> None:
        cells = [
            _land(HexType.WHEAT, 6, fixed=True),
            _land(HexType.SHEEP, 8),
            _land(HexType.WOOD, 3),
            _land(HexType.HILLS, 4),
        ]
        board = _row_board(cells)
        for seed in range(30):
            hexes = shuffle(board, SIX_EIGHT_ONLY, seed=seed)
            self.assertEqual((hexes[0].type, hexes[0].number), (HexType.WHEAT, 6))
            self.assertNotIn(hexes[1].number, (6, 8))

    def test_number_groups_shuffle_on_fixed_terrain(self) -> None:
        cells = [
            _land(HexType.WOOD, 3, fixed=True, number_group=1),
            _land(HexType.SHEEP, 4, fixed=True, number_group=1),
            _land(HexType.WHEAT, 9, fixed=True, number_group=2),
            _land(HexType.HILLS, 10, fixed=True, number_group=2),
        ]
        board = _row_board(cells)
        seen = set()
        for seed in range(20):
            hexes = shuffle(board, NO_CONSTRAINTS, seed=seed)
            self.assertEqual([hex_.type for hex_ in hexes], [cell.type for cell in cells])
            self.assertEqual({hexes[0].number, hexes[1].number}, {3, 4})
            self.assertEqual({hexes[2].number, hexes[3].number}, {9, 10})
            seen.add(hexes[0].number)
        self.assertEqual(seen, {3, 4})


class PortShuffleTests(unittest.TestCase):
    def test_fixed_ports_only_leave_layout_unchanged(self) -> None:
        fixed_port = Port(type=PortType.BRICK, orientation=Orientation.E, fixed=True)
        board = _row_board([_sea(port=fixed_port), _land(HexType.HILLS, 5), _sea()])
        hexes = shuffle(board, seed=0)
        self.assertEqual(
            [hex_.port for hex_ in hexes],
            [hex_.port for hex_ in board.recommended_layout],
        )

    def test_moveable_ports_find_new_docks(self) -> None:
        cells = [
            _sea(port=Port(type=PortType.ORE, orientation=Orientation.E, moveable=True)),
            _land(HexType.MOUNTAIN, 5),
            _sea(),
            _land(HexType.WOOD, 9),
            _sea(),
        ]
        board = _row_board(cells)
        positions = set()
        for seed in range(20):
            hexes = shuffle(board, seed=seed)
            placed = [position for position, hex_ in enumerate(hexes) if hex_.port is not None]
            self.assertEqual(len(placed), 1)
            port = hexes[placed[0]].port
            self.assertEqual(port.type, PortType.ORE)
            self.assertFalse(port.moveable)
            self.assertIn(port.orientation, (Orientation.E, Orientation.W))
            positions.add(placed[0])
        self.assertGreater(len(positions), 1)

    def test_ports_forbidden_hexes_stay_empty(self) -> None:
        cells = [
            _sea(ports_allowed=False),
            _land(HexType.MOUNTAIN, 5),
            _sea(),
            _land(HexType.WOOD, 9),
            _sea(port=Port(type=PortType.GRAIN, orientation=Orientation.W, moveable=True)),
        ]
        board = _row_board(cells)
        for seed in range(15):
            hexes = shuffle(board, seed=seed)
            self.assertIsNone(hexes[0].port)
            self.assertEqual(_port_types(hexes), Counter({PortType.GRAIN: 1}))

    def test_too_many_moveable_ports(self) -> None:
        cells = [
            _sea(port=Port(type=PortType.ORE, orientation=Orientation.E, moveable=True)),
            _land(HexType.MOUNTAIN, 5),
            _sea(port=Port(type=PortType.WOOL, orientation=Orientation.W, moveable=True)),
            _sea(port=Port(type=PortType.GRAIN, orientation=Orientation.W, moveable=True)),
        ]
        board = _row_board(cells)
        with self.assertRaises(PortShufflingError):
            shuffle(board, seed=0)

    def test_slot_and_moveable_ports_share_one_pool(self) -> None:
        cells = [
            _sea(port=Port(type=PortType.ORE, orientation=Orientation.E)),
            _land(HexType.MOUNTAIN, 5),
            _sea(),
            _land(HexType.WOOD, 9),
            _sea(port=Port(type=PortType.TIMBER, orientation=Orientation.W, moveable=True)),
        ]
        board = _row_board(cells)
        types = set()
        for seed in range(20):
            hexes = shuffle(board, seed=seed)
            self.assertEqual(hexes[0].port.orientation, Orientation.E)
            self.assertEqual(_port_types(hexes), Counter({PortType.ORE: 1, PortType.TIMBER: 1}))
            types.add(hexes[0].port.type)
        self.assertEqual(types, {PortType.ORE, PortType.TIMBER})


if __name__ == "__main__":
    unittest.main()
