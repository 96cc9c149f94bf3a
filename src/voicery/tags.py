# SPDX-License-Identifier: GPL-3.0-or-later

# (label, foreground, background)
NOTE_TAGS = {
    'idea':     ('Idea', '#CA8A04', '#FEF9C3'),
    'task':     ('Task', '#2563EB', '#DBEAFE'),
    'personal': ('Personal', '#DB2777', '#FCE7F3'),
    'work':     ('Work', '#16A34A', '#DCFCE7'),
}

TAG_NAMES = list(NOTE_TAGS.keys())


def is_valid_tag(tag) -> bool:
    return isinstance(tag, str) and tag in NOTE_TAGS


def tag_label(tag) -> str:
    """Display label for a tag, or an empty string for unknown/unset tags."""
    if not is_valid_tag(tag):
        return ''
    return NOTE_TAGS[tag][0]
