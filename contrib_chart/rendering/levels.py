LEVEL_THRESHOLDS: tuple[int, ...] = (1, 5, 10, 20)


def contribution_level(count: int) -> int:
    """Map a daily contribution count to a heatmap level in range 0..4."""

    if count < 0:
        raise ValueError("contribution count cannot be negative")

    level = 0
    for threshold in LEVEL_THRESHOLDS:
        if count < threshold:
            break
        level += 1
    return level
