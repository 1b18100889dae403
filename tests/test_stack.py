import unittest

from htmlfilter import SuppressionStack


class TestSuppressionStack(unittest.TestCase):
    def test_push_pop_is_lifo(self):
        stack = SuppressionStack()
        stack.push("div")
        stack.push("b")
        assert len(stack) == 2
        assert stack.peek() == "b"
        assert stack.pop() == "b"
        assert stack.pop() == "div"
        assert len(stack) == 0

    def test_empty_stack(self):
        stack = SuppressionStack()
        assert not stack
        assert stack.pop() is None
        assert stack.peek() is None

    def test_clear(self):
        stack = SuppressionStack()
        stack.push("script")
        assert stack
        stack.clear()
        assert not stack

    def test_repr_lists_names_bottom_to_top(self):
        stack = SuppressionStack()
        stack.push("div")
        stack.push("p")
        assert repr(stack) == "SuppressionStack(['div', 'p'])"


if __name__ == "__main__":
    unittest.main()
