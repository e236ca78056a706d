"""
Interface to the prompt-driven survey generator.

The generator itself lives outside this package. It takes a free-text
prompt and returns a complete Survey, or fails with a human-readable
message.
"""

from abc import ABC, abstractmethod

from surveylink.model import Survey


class GenerationError(Exception):
    """The generator could not produce a survey. str(e) is shown to the author."""
    pass


class SurveyGenerator(ABC):
    @abstractmethod
    def generate(self, prompt: str) -> Survey:
        """
        Produce a survey from `prompt`.

        Raises:
            GenerationError: On any failure
        """
        ...
