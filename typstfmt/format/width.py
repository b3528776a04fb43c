def effective_line_length(fragment: str) -> int:
    """Length of the last line of ``fragment``, not counting space characters.

    Spaces are discounted on purpose: the layout decision uses this estimate,
    not the rendered width.
    """
    last_line = fragment.rsplit("\n", 1)[-1]
    return len(last_line) - last_line.count(" ")
