import re

# Whitespace other than a line feed. Covers tabs, stray carriage returns and
# unicode spaces left over after the NBSP swap.
_TRAILING_WS = re.compile(r"[^\S\n]+(?=\n)")
_BLANK_RUNS = re.compile(r"\n{3,}")


def normalize_job_description(text: str) -> str:
    """Canonicalise free-text job description input before it is sent.

    The steps run in a fixed order: CRLF to LF, NBSP to space, strip
    trailing whitespace on every line, collapse 3+ line breaks to a single
    blank line, then trim the whole string.  Applying it twice gives the
    same result as applying it once.
    """
    if not text:
        return ""
    text = text.replace("\r\n", "\n")
    text = text.replace("\u00a0", " ")
    text = _TRAILING_WS.sub("", text)
    text = _BLANK_RUNS.sub("\n\n", text)
    return text.strip()
