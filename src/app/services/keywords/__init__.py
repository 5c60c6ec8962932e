from src.app.services.keywords.generator import KeywordGenerator, KeywordGeneratorState

__all__ = ["KeywordGenerator", "KeywordGeneratorState"]
