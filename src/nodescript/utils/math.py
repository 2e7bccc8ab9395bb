def clamp(value, min_value, max_value):
    """Clamp a number between min_value and max_value inclusive."""
    return max(min_value, min(value, max_value))


def percent(part, whole, empty=0.0):
    """``part`` as a percentage of ``whole``; ``empty`` when whole is not positive."""
    if whole <= 0:
        return empty
    return part * 100.0 / whole
