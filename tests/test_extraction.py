from codepix_gateway.extraction import extract_code_block


def test_tagged_block_is_trimmed_and_refenced():
    raw = "Here you go:\n```python\n\n  def f():\n      return 1  \n\n```\nEnjoy!"
    assert extract_code_block(raw) == "```python\ndef f():\n      return 1\n```"


def test_extraction_is_a_fixed_point():
    raw = "intro\n```js\nconst a = 1;\n```\noutro"
    once = extract_code_block(raw)
    assert extract_code_block(once) == once

    untagged = extract_code_block("```const a = 1;```")
    assert extract_code_block(untagged) == untagged


def test_no_fences_returns_trimmed_input():
    assert extract_code_block("  just prose, no code  \n") == "just prose, no code"


def test_tagged_block_wins_over_earlier_untagged_block():
    raw = "```\nplain()\n```\n\nand\n\n```go\nfunc main() {}\n```"
    assert extract_code_block(raw) == "```go\nfunc main() {}\n```"


def test_first_tagged_block_is_selected():
    raw = "```python\nfirst = 1\n```\n```python\nsecond = 2\n```"
    assert extract_code_block(raw) == "```python\nfirst = 1\n```"


def test_tagged_block_with_blank_body_is_skipped():
    raw = "```python\n   \n```\n```rust\nfn main() {}\n```"
    assert extract_code_block(raw) == "```rust\nfn main() {}\n```"


def test_untagged_block_falls_back_to_plain_fence():
    assert extract_code_block("text ```x = 1``` more") == "```\nx = 1\n```"


def test_tags_with_symbols_are_kept():
    assert extract_code_block("```c++\nint x;\n```") == "```c++\nint x;\n```"
    assert extract_code_block("```c#\nvar x = 1;\n```") == "```c#\nvar x = 1;\n```"


def test_unclosed_fence_is_treated_as_plain_text():
    raw = "```python\nprint('never closed')\n"
    assert extract_code_block(raw) == raw.strip()


def test_crlf_line_endings_keep_the_tag():
    assert extract_code_block("```python\r\nx = 1\r\n```") == "```python\nx = 1\n```"
