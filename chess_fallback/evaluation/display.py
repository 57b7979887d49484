"""
Score formatting for evaluation bars and move lists.
"""

import math

# Scores beyond this many centipawns are shown as a mating advantage
MATE_DISPLAY_THRESHOLD = 1000

# Centipawns at which the bar sits at ~73% for the leading side
BAR_SCALE = 500

BAR_MIN_PERCENT = 5.0
BAR_MAX_PERCENT = 95.0


def format_evaluation(score: int) -> str:
    """
    Format a White-centric score for display.

    Examples:
        150 → "1.5", -30 → "-0.3", 1200 → "+M", -5000 → "-M"
    """
    if abs(score) > MATE_DISPLAY_THRESHOLD:
        return "+M" if score > 0 else "-M"
    return f"{score / 100:.1f}"


def evaluation_percentage(score: int) -> float:
    """
    Map a White-centric score to White's share of an evaluation bar.

    A logistic curve centered on 0 (50%), clamped so neither side's
    share disappears completely.
    """
    # Bounded exponent, math.exp overflows past ~709
    exponent = max(-50.0, min(50.0, -score / BAR_SCALE))
    percentage = 100.0 / (1.0 + math.exp(exponent))
    return max(BAR_MIN_PERCENT, min(BAR_MAX_PERCENT, percentage))
