# SPDX-License-Identifier: GPL-3.0-or-later

REFINE_INSTRUCTION = 'Refine the following text to be clear, professional, and structured:'


def format_stack(notes) -> str:
    """All note texts as one block, separated by blank lines."""
    return '\n\n'.join(note.text for note in notes)


def refine_prompt(note) -> str:
    """A prompt asking a chat assistant to tidy up the note."""
    return f'{REFINE_INSTRUCTION}\n\n{note.text}'
