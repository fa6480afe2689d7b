"""
Keyword-overlap scoring between a volunteer's stated skills and a job posting.
Fully offline, no external API required.
"""
import re

STOPWORDS = {
    "a", "an", "the", "and", "or", "but", "in", "on", "at", "to", "for",
    "of", "with", "by", "from", "up", "about", "into", "is", "are", "be",
    "have", "has", "do", "will", "can", "not", "we", "you", "your", "our",
    "their", "they", "it", "its", "this", "that", "as", "if", "so", "all",
    "more", "some", "no", "very", "just", "also", "each", "must", "need",
    "able", "per", "etc", "help", "helping", "helper", "volunteer",
    "volunteers", "volunteering", "support", "work", "team", "new", "day",
}


def tokenize(text: str) -> set[str]:
    """Extract meaningful keyword tokens from text."""
    words = re.findall(r"[a-zA-Z][a-zA-Z0-9+#-]{2,}", text.lower())
    return {w for w in words if w not in STOPWORDS}


def compute_match(job_text: str, volunteer_text: str) -> dict:
    """
    Compare a volunteer profile against a job's keywords.
    Returns score (0-100) and the matched keywords.
    """
    job_keywords = tokenize(job_text)
    volunteer_keywords = tokenize(volunteer_text)

    if not job_keywords:
        return {"score": 0.0, "matched": []}

    matched = sorted(job_keywords & volunteer_keywords)
    score = round(len(matched) / len(job_keywords) * 100, 1)
    return {"score": score, "matched": matched[:20]}
