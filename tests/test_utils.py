#
# Scribe - Utils Tests
#

# Third party ----------------------------------------------------------------------------------------------------------
import pytest

# Local ----------------------------------------------------------------------------------------------------------------
from scribe.utils import class_name, is_textual, quote_text


# Tests ----------------------------------------------------------------------------------------------------------------


class TestClassName:
    @pytest.mark.parametrize(
        "obj, fully_qualified, expected",
        [
            pytest.param(int, False, "int", id="builtin-class"),
            pytest.param(10, False, "int", id="builtin-instance"),
            pytest.param(10, True, "int", id="builtin-never-qualified"),
            pytest.param(None, False, "NoneType", id="none"),
            pytest.param(ValueError("x"), False, "ValueError", id="exception"),
        ],
    )
    def test_builtin_names(self, obj, fully_qualified, expected):
        """Return plain names for builtins, qualified or not."""
        assert class_name(obj, fully_qualified=fully_qualified) == expected

    @pytest.mark.parametrize(
        "as_class, fully_qualified",
        [
            pytest.param(True, True, id="class-fq"),
            pytest.param(False, True, id="instance-fq"),
            pytest.param(True, False, id="class-no-fq"),
            pytest.param(False, False, id="instance-no-fq"),
        ],
    )
    def test_user_class(self, as_class, fully_qualified):
        """Return user class name respecting fully_qualified for class and instance."""

        class Card:
            pass

        target = Card if as_class else Card()
        expected = f"{Card.__module__}.{Card.__qualname__}" if fully_qualified else "Card"
        assert class_name(target, fully_qualified=fully_qualified) == expected


class TestIsTextual:
    @pytest.mark.parametrize(
        "obj, expected",
        [
            pytest.param("abc", True, id="str"),
            pytest.param(b"abc", True, id="bytes"),
            pytest.param(bytearray(b"abc"), True, id="bytearray"),
            pytest.param(["a"], False, id="list"),
            pytest.param(1, False, id="int"),
        ],
    )
    def test_textual(self, obj, expected):
        assert is_textual(obj) is expected


class TestQuoteText:
    @pytest.mark.parametrize(
        "text, expected",
        [
            pytest.param("abc", '"abc"', id="plain"),
            pytest.param("", '""', id="empty"),
            pytest.param('say "hi"', '"say \\"hi\\""', id="quotes"),
            pytest.param("a\\b", '"a\\\\b"', id="backslash"),
            pytest.param("line\nnext\t", '"line\\nnext\\t"', id="control"),
            pytest.param("♣ ♦", '"♣ ♦"', id="unicode-kept"),
        ],
    )
    def test_escapes(self, text, expected):
        """Quote with double quotes and escape specials, keep non-ASCII."""
        assert quote_text(text) == expected
