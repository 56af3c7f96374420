"""
Edit-distance kernel.

Classic Levenshtein distance used by the similarity scorer for both
word-level near matches and whole-answer character similarity.
"""


def levenshtein_distance(a: str, b: str) -> int:
    """
    Compute the minimum number of single-character edits turning a into b.

    Insertions, deletions and substitutions each cost one. The table cell
    dp[i][j] holds the distance between the first i characters of a and
    the first j characters of b.

    Args:
        a: Source string.
        b: Target string.

    Returns:
        The edit distance, a non-negative integer.
    """
    rows, cols = len(a) + 1, len(b) + 1
    dp = [[0] * cols for _ in range(rows)]

    for i in range(rows):
        dp[i][0] = i
    for j in range(cols):
        dp[0][j] = j

    for i in range(1, rows):
        for j in range(1, cols):
            substitution = 0 if a[i - 1] == b[j - 1] else 1
            dp[i][j] = min(
                dp[i - 1][j] + 1,
                dp[i][j - 1] + 1,
                dp[i - 1][j - 1] + substitution,
            )

    return dp[-1][-1]
