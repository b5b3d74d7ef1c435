"""Tests for slug derivation."""

from vellum.core.utils import is_safe_dirname_part, slug_for, slugify


def test_slugify_basic():
    """Test basic slugification."""
    assert slugify("Parallel transport") == "parallel-transport"
    assert slugify("Hello World") == "hello-world"


def test_slugify_unicode():
    """Test unicode normalization."""
    # En dash (–) should be normalized
    assert slugify("Riemann–Christoffel symbols") == "riemann-christoffel-symbols"
    # Em dash (—) should also work
    assert slugify("Test—Example") == "test-example"
    # Accents are dropped
    assert slugify("Caffè e crème brûlée") == "caffe-e-creme-brulee"


def test_slugify_punctuation():
    """Test punctuation removal."""
    assert slugify("Hello, World!") == "hello-world"
    assert slugify("Test (with parentheses)") == "test-with-parentheses"
    assert slugify("Question?") == "question"
    assert slugify("snake_case_title") == "snakecasetitle"


def test_slugify_multiple_spaces():
    """Test multiple spaces converted to single dash."""
    assert slugify("Multiple   spaces   here") == "multiple-spaces-here"
    assert slugify("Tabs\tand\nnewlines") == "tabs-and-newlines"


def test_slugify_multiple_dashes():
    """Test multiple dashes collapsed to single dash."""
    assert slugify("Test---Example") == "test-example"
    assert slugify("Test - - Example") == "test-example"


def test_slugify_leading_trailing():
    """Test leading/trailing dashes are stripped."""
    assert slugify(" Leading and trailing ") == "leading-and-trailing"
    assert slugify("-Already-Has-Dashes-") == "already-has-dashes"


def test_slugify_empty():
    """Test empty string."""
    assert slugify("") == ""
    assert slugify("   ") == ""
    assert slugify("!!!") == ""


def test_slugify_special_chars():
    """Test special character handling."""
    assert slugify("File & Folder") == "file-folder"
    assert slugify("C++ Programming") == "c-programming"
    assert slugify("Node.js") == "nodejs"


def test_slugify_idempotent():
    for title in ("Hello World", "Caffè – ricette", "C++ Programming", "a_b-c d"):
        once = slugify(title)
        assert slugify(once) == once


def test_slug_for_falls_back_to_identifier():
    assert slug_for("My Post", "01HZX3K9QW8E2M4N6P7R8S9T0V") == "my-post"
    assert slug_for("???", "01HZX3K9QW8E2M4N6P7R8S9T0V") == "01hzx3k9qw8e2m4n6p7r8s9t0v"


def test_is_safe_dirname_part():
    assert is_safe_dirname_part("my-post")
    assert not is_safe_dirname_part("")
    assert not is_safe_dirname_part("..")
    assert not is_safe_dirname_part("a/b")
    assert not is_safe_dirname_part("a\\b")
