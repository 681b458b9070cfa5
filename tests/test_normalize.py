import unittest

from cvcompare.normalize import normalize_job_description


class NormalizeJobDescriptionTests(unittest.TestCase):
    def test_collapses_blank_lines_and_trailing_spaces(self):
        self.assertEqual(
            normalize_job_description("Line1\r\n\r\n\r\nLine2  \n"), "Line1\n\nLine2"
        )

    def test_replaces_non_breaking_spaces(self):
        self.assertEqual(
            normalize_job_description("React\u00a0and\u00a0TypeScript"),
            "React and TypeScript",
        )

    def test_strips_tabs_and_nbsp_before_line_breaks(self):
        self.assertEqual(
            normalize_job_description("Python\t \u00a0\nDjango"), "Python\nDjango"
        )

    def test_keeps_single_blank_line_between_paragraphs(self):
        text = "About us\n\nRequirements\n- Python"
        self.assertEqual(normalize_job_description(text), text)

    def test_empty_and_whitespace_only(self):
        self.assertEqual(normalize_job_description(""), "")
        self.assertEqual(normalize_job_description(" \r\n\u00a0\n\t"), "")

    def test_idempotent(self):
        samples = [
            "",
            "Line1\r\n\r\n\r\nLine2  \n",
            "  Senior Engineer\r\n\r\n\r\nReact required.   \n",
            "a\r \nb",
            "a\r\r\n\n\n\nb",
            "x \u00a0\r\n \r\n\t\r\n\r\ny \n",
            "\n\n\n\nleading\n \n \n \ntrailing\n\n\n",
            "\u00a0\u00a0indented\u00a0\n\u00a0",
            "mixed\rcarriage\r\nreturns\r",
        ]
        for sample in samples:
            once = normalize_job_description(sample)
            self.assertEqual(normalize_job_description(once), once, repr(sample))


if __name__ == "__main__":
    unittest.main()
