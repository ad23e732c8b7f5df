from typing import List, Optional, Sequence


def background_rule(css_class: str, url: str) -> str:
    return f".{css_class} {{ background-image: url({url}); }}"


def render_stylesheet(
    css_class: str,
    css_path: str,
    base_name: str,
    ext: str,
    orientation: Optional[str],
    breakpoints: Sequence[int],
) -> str:
    """
    One line per rule: the full-size image first, then one max-width media
    query per breakpoint in the order given (later rules win in the cascade).
    """
    lines: List[str] = []

    base = background_rule(css_class, f"{css_path}/{base_name}.{ext}")
    if orientation:
        lines.append(f"@media (orientation: {orientation}) {{ {base} }}")
    else:
        lines.append(base)

    orientation_clause = f"(orientation: {orientation}) and " if orientation else ""
    for w in breakpoints:
        rule = background_rule(css_class, f"{css_path}/{base_name}-{w}.{ext}")
        lines.append(f"@media {orientation_clause}(max-width: {w}px) {{ {rule} }}")

    return "\n".join(lines) + "\n"
