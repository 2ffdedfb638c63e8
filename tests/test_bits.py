from sudoku.bits import (
    BIT_COUNT,
    LOWEST_BIT,
    NUMBER_SET_MASK,
    SINGLE_NUMBER,
    TABLE_SIZE,
    WITHOUT_LOWEST,
    available_from_taken,
    format_set,
    index_to_set,
    iter_bits,
    number_to_set,
)


def test_tables_cover_every_mask():
    assert len(BIT_COUNT) == TABLE_SIZE
    assert len(LOWEST_BIT) == TABLE_SIZE
    assert len(WITHOUT_LOWEST) == TABLE_SIZE
    assert len(SINGLE_NUMBER) == TABLE_SIZE


def test_bit_count():
    assert BIT_COUNT[0] == 0
    assert BIT_COUNT[0b1010] == 2
    assert BIT_COUNT[NUMBER_SET_MASK] == 9
    assert BIT_COUNT[TABLE_SIZE - 1] == 10


def test_lowest_bit_and_remainder():
    assert LOWEST_BIT[0] == -1
    assert LOWEST_BIT[0b1000] == 3
    assert LOWEST_BIT[0b1100] == 2
    assert WITHOUT_LOWEST[0b1100] == 0b1000
    assert WITHOUT_LOWEST[0] == 0


def test_single_number():
    for number in range(1, 10):
        assert SINGLE_NUMBER[number_to_set(number)] == number
    assert SINGLE_NUMBER[0] == 0
    assert SINGLE_NUMBER[1] == 0  # bit 0 is not a digit
    assert SINGLE_NUMBER[0b110] == 0


def test_set_helpers():
    assert number_to_set(4) == 0b10000
    assert index_to_set(0) == 1
    assert available_from_taken(0) == NUMBER_SET_MASK
    assert available_from_taken(NUMBER_SET_MASK) == 0
    assert available_from_taken(number_to_set(1) | number_to_set(9)) == 0b0111111100


def test_iter_bits():
    assert list(iter_bits(0)) == []
    assert list(iter_bits(0b1010010)) == [1, 4, 6]


def test_format_set():
    assert format_set(number_to_set(1) | number_to_set(4) | number_to_set(9)) == "{ 1 4 9 }"
    assert format_set(0) == "{ }"
