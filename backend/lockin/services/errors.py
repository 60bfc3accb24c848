from __future__ import annotations


class LLMError(Exception):
    """The LLM provider was unreachable or returned content we could not use."""


class ResumeNotAnalyzedError(Exception):
    def __init__(self, resume_id: str) -> None:
        super().__init__(f"Resume {resume_id} has not been analyzed yet")
        self.resume_id = resume_id
