"""Token counting for prompt and snippet budgets."""
from __future__ import annotations

import tiktoken


class Tokenizer:
    """Counts tokens with a fixed tiktoken encoding (GPT-2 by default)."""

    def __init__(self, encoding_name: str = "gpt2") -> None:
        self.encoding_name = encoding_name
        self._encoding: tiktoken.Encoding | None = None

    @property
    def encoding(self) -> tiktoken.Encoding:
        if self._encoding is None:
            self._encoding = tiktoken.get_encoding(self.encoding_name)
        return self._encoding

    def count_tokens(self, text: str) -> int:
        # special-token text inside source files is counted as plain text
        return len(self.encoding.encode(text, disallowed_special=()))
