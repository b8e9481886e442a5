"""
Tests for keyword text signal extraction
"""
from text_signals import TextSignalExtractor


class TestTextSignalExtractor:
    """Tests for TextSignalExtractor"""

    def test_normalises_and_tokenises(self, extractor):
        signals = extractor.extract("  How To   Install Eufy  ")
        assert signals.normalized == "how to install eufy"
        assert signals.tokens == ("how", "to", "install", "eufy")
        assert signals.token_count == 4

    def test_empty_text(self, extractor):
        """Empty and whitespace-only text yields no tokens"""
        for text in ("", "   ", "\t\n"):
            signals = extractor.extract(text)
            assert signals.is_empty
            assert not signals.question_markers
            assert not signals.is_question

    def test_how_to_phrase(self, extractor):
        signals = extractor.extract("how to install eufy security camera")
        assert "how_to" in signals.question_markers
        assert "how_to" in signals.structure_cues
        assert signals.intent_classes == frozenset({"informational"})
        assert signals.is_question

    def test_markers_match_whole_words(self, extractor):
        """'is' inside 'this' is not a definition marker"""
        signals = extractor.extract("this camera")
        assert "definition" not in signals.question_markers

    def test_comparison(self, extractor):
        signals = extractor.extract("eufy doorbell vs ring")
        assert "comparison" in signals.question_markers
        assert "comparison" in signals.structure_cues
        assert signals.intent_classes == frozenset({"comparative"})
        assert not signals.is_question

    def test_mixed_intent(self, extractor):
        signals = extractor.extract("best eufy camera price")
        assert signals.intent_classes == frozenset({"comparative", "transactional"})

    def test_troubleshooting_phrase(self, extractor):
        signals = extractor.extract("eufy app not working")
        assert "troubleshooting" in signals.structure_cues
        assert "navigational" in signals.intent_classes

    def test_faq_token(self, extractor):
        signals = extractor.extract("eufy camera q&a")
        assert "faq" in signals.structure_cues

    def test_number_detection(self, extractor):
        assert extractor.extract("top 10 security cameras").has_number
        assert not extractor.extract("security cameras").has_number

    def test_trailing_question_mark(self, extractor):
        assert extractor.extract("eufy worth it?").is_question

    def test_chinese_markers(self, extractor):
        """Chinese question and structure words are recognised"""
        signals = extractor.extract("如何安装摄像头")
        assert signals.token_count == 4
        assert "how_to" in signals.question_markers
        assert "how_to" in signals.structure_cues
        assert signals.is_question

    def test_deterministic(self):
        first = TextSignalExtractor().extract("what is eufy smart home")
        second = TextSignalExtractor().extract("what is eufy smart home")
        assert first == second
