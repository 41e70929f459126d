from nhxtree.config import ParserConfig
from nhxtree.exceptions import GrammarError
from nhxtree.parser.error_reporter import describe_token, make_error, render_context
from nhxtree.parser.tokens import Token, TokenType


def test_describe_end_of_input():
    assert describe_token(Token(TokenType.END_OF_INPUT, "", 4), 10) == "end of input"


def test_describe_token_truncates_long_text():
    token = Token(TokenType.IDENTIFIER, "ABCDEFGHIJKLMNOP", 0)
    assert describe_token(token, 5) == "token 'ABCDE...'"
    assert describe_token(token, 16) == "token 'ABCDEFGHIJKLMNOP'"


def test_describe_invalid_character():
    assert describe_token(Token(TokenType.INVALID, "#", 3), 10) == "character '#'"


def test_render_context_short_input():
    lines = render_context("(A,B", 4, 20).split("\n")
    assert lines[0].strip() == "(A,B"
    assert lines[1].index("^") == lines[0].index("(") + 4


def test_render_context_truncates_both_sides():
    text = "x" * 50 + "#" + "y" * 50
    window, caret = render_context(text, 50, 5).split("\n")
    assert window.strip() == "...xxxxx#yyyyy..."
    assert window[caret.index("^")] == "#"


def test_render_context_blanks_control_characters():
    window, caret = render_context("(A,\n\tB)#", 7, 20).split("\n")
    assert "\n" not in window and "\t" not in window
    assert window[caret.index("^")] == "#"


def test_make_error_message():
    text = "(A:,B);"
    error = make_error(
        GrammarError, text, Token(TokenType.COMMA, ",", 3), "a branch length", ParserConfig()
    )
    assert error.position == 3
    assert error.reason == "Unexpected token ',', expected a branch length"
    message = str(error)
    assert message.startswith("Unexpected token ',', expected a branch length at position 3")
    assert "(A:,B);" in message
    assert message.endswith("^")


def test_make_error_includes_token_detail():
    token = Token(TokenType.INVALID, "[", 5, "unterminated comment")
    error = make_error(GrammarError, "(A,B)[oops", token)
    assert "(unterminated comment)" in error.reason
