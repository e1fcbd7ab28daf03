"""Prompts for snippet selection and explanation."""
from __future__ import annotations

from typing import Sequence

from .models import Passage

DELIMITER = "######"


def build_select_prompt(passages: Sequence[Passage], query: str) -> str:
    blocks = [
        (
            f"Repository: {p.repo_name}\n"
            f"Path: {p.relative_path}\n"
            f"Language: {p.lang}\n"
            f"Index: {i}\n\n"
            f"{p.text}\n"
            f"{DELIMITER}\n"
        )
        for i, p in enumerate(passages)
    ]

    # the worked example nudges the model towards a bare number with no
    # surrounding spaces or punctuation
    instructions = "\n".join(
        [
            f'Above are {len(passages)} code snippets separated by "{DELIMITER}". '
            "Your job is to select the snippet that best answers the question. "
            "Reply with a single number indicating the index of the snippet in the list. "
            'If none of the snippets seem relevant, reply with "0".',
            "",
            "Q:What icon do we use to clear search history?",
            "A:3",
            "",
            f"Q:{query}",
            "A:",
        ]
    )
    return "".join(blocks) + instructions


def build_explain_prompt(snippet: Passage, query: str) -> str:
    return "\n".join(
        [
            f"File: {snippet.relative_path}",
            "",
            snippet.text,
            "",
            "#####",
            "",
            "Above is a code snippet. "
            "Answer the user's question with a detailed response. "
            "Separate each function out and explain why it is relevant. "
            "Format your response in GitHub markdown with code blocks annotated "
            "with programming language. Include the path of the file.",
            "",
            f"Q:{query}",
            "A:",
        ]
    )
