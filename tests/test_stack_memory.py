"""
Stack, Memory and State Tests
"""

import pytest

from dreamer_vm.config import MAX_STACK_DEPTH, WORD_MASK
from dreamer_vm.cpu.state import State
from dreamer_vm.errors import StackEmpty, StackFull
from dreamer_vm.mem.memory import Memory
from dreamer_vm.mem.stack import Stack


class TestStack:
    def test_push_pop_lifo(self):
        s = Stack()
        assert s.push(1) == 1
        assert s.push(2) == 2
        assert s.pop() == 2
        assert s.pop() == 1
        assert s.empty()

    def test_peek(self):
        s = Stack([10, 20, 30])
        assert s.peek() == 30
        assert s.peek(1) == 20
        assert s.peek(2) == 10
        assert s.peek(3) is None
        assert Stack().peek() is None

    def test_pop_empty(self):
        s = Stack()
        with pytest.raises(StackEmpty):
            s.pop()
        assert s.depth() == 0

    def test_push_full_leaves_stack_unchanged(self):
        s = Stack([7] * MAX_STACK_DEPTH)
        assert s.full()
        with pytest.raises(StackFull):
            s.push(1)
        assert s.depth() == MAX_STACK_DEPTH
        assert s.peek() == 7

    def test_max_depth_is_65535(self):
        assert MAX_STACK_DEPTH == 65535

    def test_small_custom_limit(self):
        s = Stack(max_depth=2)
        s.push(1)
        s.push(2)
        with pytest.raises(StackFull):
            s.push(3)

    def test_oversized_initial_contents(self):
        with pytest.raises(StackFull):
            Stack([0, 0, 0], max_depth=2)

    def test_copy_is_independent(self):
        s = Stack([1, 2])
        c = s.copy()
        c.push(3)
        assert s.to_list() == [1, 2]
        assert c.to_list() == [1, 2, 3]

    @pytest.mark.parametrize("value", [-1, WORD_MASK + 1, 1 << 64])
    def test_push_out_of_range(self, value):
        s = Stack([5])
        with pytest.raises(ValueError, match="word range"):
            s.push(value)
        assert s.to_list() == [5]

    def test_initial_contents_out_of_range(self):
        with pytest.raises(ValueError):
            Stack([1, WORD_MASK + 1])

    def test_push_max_word(self):
        s = Stack()
        s.push(WORD_MASK)
        assert s.pop() == WORD_MASK

    def test_equality(self):
        assert Stack([1, 2]) == Stack([1, 2])
        assert Stack([1, 2]) == [1, 2]
        assert Stack([1, 2]) != Stack([2, 1])


class TestMemory:
    def test_unset_reads_zero(self):
        m = Memory()
        assert m.read(0) == 0
        assert m.read(WORD_MASK) == 0
        assert m.read(0xDEADBEEF) == 0
        assert len(m) == 0

    def test_write_read(self):
        m = Memory()
        m.write(100, 42)
        assert m.read(100) == 42
        assert 100 in m
        assert 101 not in m

    def test_overwrite(self):
        m = Memory()
        m.write(5, 1)
        m.write(5, 2)
        assert m.read(5) == 2
        assert len(m) == 1

    def test_never_shrinks(self):
        m = Memory()
        m.write(5, 9)
        m.write(5, 0)
        assert len(m) == 1
        assert m.read(5) == 0

    def test_items_sorted(self):
        m = Memory({30: 3, 10: 1, 20: 2})
        assert list(m.items()) == [(10, 1), (20, 2), (30, 3)]
        assert m.to_dict() == {10: 1, 20: 2, 30: 3}

    def test_copy_is_independent(self):
        m = Memory({1: 1})
        c = m.copy()
        c.write(2, 2)
        assert m.to_dict() == {1: 1}
        assert c == {1: 1, 2: 2}

    def test_out_of_range_rejected(self):
        m = Memory()
        with pytest.raises(ValueError, match="address"):
            m.write(-1, 1)
        with pytest.raises(ValueError, match="memory value"):
            m.write(1, WORD_MASK + 1)
        with pytest.raises(ValueError, match="address"):
            m.read(1 << 64)
        assert len(m) == 0


class TestState:
    def test_default_is_zero(self):
        s = State()
        assert s.program_counter == 0
        assert s.register == 0
        assert s.stack.depth() == 0
        assert len(s.memory) == 0

    @pytest.mark.parametrize("field", ["pc", "reg"])
    @pytest.mark.parametrize("value", [-1, WORD_MASK + 1])
    def test_fields_must_be_words(self, field, value):
        with pytest.raises(ValueError, match=field):
            State(**{field: value})

    def test_copy_is_deep(self):
        s = State(pc=3, reg=4, stack=Stack([1]), memory=Memory({2: 2}))
        c = s.copy()
        c.stack.push(9)
        c.memory.write(8, 8)
        c.pc = 99
        assert s == State(pc=3, reg=4, stack=Stack([1]), memory=Memory({2: 2}))
        assert c != s

    def test_reset(self):
        s = State(pc=3, reg=4, stack=Stack([1]), memory=Memory({2: 2}))
        s.reset()
        assert s == State()

    def test_to_dict(self):
        s = State(pc=1, reg=2, stack=Stack([3, 4]), memory=Memory({9: 5, 1: 6}))
        assert s.to_dict() == {
            'program_counter': 1,
            'register': 2,
            'stack': [3, 4],
            'memory': {1: 6, 9: 5},
        }

    def test_display(self):
        s = State(pc=1, reg=2, stack=Stack([3, 4]), memory=Memory({9: 5}))
        assert s.display() == "pc=1 reg=2 stack=[3, 4] memory={9: 5}"
        assert str(State()) == "pc=0 reg=0 stack=[] memory={}"
