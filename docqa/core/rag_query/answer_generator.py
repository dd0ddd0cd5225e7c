"""
Grounded answer generation.

Formats ranked passages into a context block and asks a Gemini chat
model to answer strictly from it. When the context does not cover the
question the model is instructed to reply with a fixed sentence, which
callers detect with is_insufficient_answer.

Dependencies: langchain_core.prompts, langchain_google_genai
System role: Generation capability backed by Gemini
"""

import logging
from typing import Sequence

from langchain_core.output_parsers import StrOutputParser
from langchain_core.prompts import ChatPromptTemplate
from langchain_google_genai import ChatGoogleGenerativeAI

from docqa.boundary.vdb.vector_schemas import Passage
from docqa.configs import LLMSettings, get_settings
from docqa.core.exceptions import GenerationUnavailable

logger = logging.getLogger(__name__)

INSUFFICIENT_INFORMATION = "I don't have enough information to answer that question."

CONTEXT_SEPARATOR = "\n\n---\n\n"

SYSTEM_PROMPT = f"""You are a helpful assistant answering questions about a business's documents.

## Instructions
1. Answer based ONLY on the provided context
2. If the answer cannot be found in the context, reply exactly: "{INSUFFICIENT_INFORMATION}"
3. Be concise and factual; do not speculate beyond the context"""

ANSWER_PROMPT = ChatPromptTemplate.from_messages([
    ("system", SYSTEM_PROMPT),
    ("human", """Context:
{context}

Question: {question}

Answer:"""),
])


def is_insufficient_answer(answer: str) -> bool:
    """Return True when `answer` is empty or the insufficient-information reply."""
    return not answer.strip() or INSUFFICIENT_INFORMATION.rstrip(".") in answer


def format_context(passages: Sequence[Passage]) -> str:
    """Join passage texts with the context separator, best first."""
    return CONTEXT_SEPARATOR.join(passage.content for passage in passages)


class GeminiAnswerGenerator:
    """AnswerGenerator backed by a Gemini chat model."""

    def __init__(
        self,
        settings: LLMSettings | None = None,
        model: ChatGoogleGenerativeAI | None = None,
    ) -> None:
        """
        Args:
            settings: LLM settings (defaults from environment)
            model: Pre-built chat model
        """
        self._settings = settings or get_settings().llm
        if model is None:
            kwargs = {}
            if self._settings.google_api_key:
                kwargs["google_api_key"] = self._settings.google_api_key
            model = ChatGoogleGenerativeAI(
                model=self._settings.chat_model,
                temperature=self._settings.temperature,
                **kwargs,
            )
        self._chain = ANSWER_PROMPT | model | StrOutputParser()

    async def answer(self, question: str, passages: Sequence[Passage]) -> str:
        """
        Answer a question from retrieved passages.

        Args:
            question: User question
            passages: Ranked passages, best first

        Returns:
            str: Answer text, or INSUFFICIENT_INFORMATION

        Raises:
            GenerationUnavailable: When the model call fails
        """
        if not passages:
            return INSUFFICIENT_INFORMATION

        try:
            answer = await self._chain.ainvoke({
                "context": format_context(passages),
                "question": question,
            })
        except Exception as e:
            logger.error(f"{__name__}:answer - {type(e).__name__}: {e}")
            raise GenerationUnavailable(
                f"Failed to generate answer: {e}",
                {"model": self._settings.chat_model},
            ) from e

        answer = answer.strip()
        return answer or INSUFFICIENT_INFORMATION
