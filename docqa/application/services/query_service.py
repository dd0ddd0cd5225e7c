"""
Query service orchestrator.

Answers a question for a caller role: embed, check the answer cache,
restrict to visible documents, rank passages, generate, cache.

Dependencies: asyncio, docqa.core.retrieval, docqa.core.rag_query
System role: Question answering orchestration
"""

import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from docqa.boundary.db.CRUD.document_crud import document_crud
from docqa.boundary.db.models.document_model import Role
from docqa.boundary.vdb.chunk_store import ChunkStore
from docqa.boundary.vdb.vector_schemas import Passage
from docqa.configs import RetrievalSettings, get_settings
from docqa.core.capabilities import AnswerGenerator, Embedder
from docqa.core.exceptions import GenerationUnavailable, NoAccessibleDocumentsError, ValidationError
from docqa.core.rag_query.answer_cache import AnswerCache, CacheHit
from docqa.core.rag_query.answer_generator import INSUFFICIENT_INFORMATION, is_insufficient_answer
from docqa.core.retrieval.hybrid_ranker import HybridRanker
from docqa.models.query import QueryAnswer, SourceReference

logger = logging.getLogger(__name__)


class QueryService:
    """
    Query service orchestrator.

    Coordinates cache, retrieval and generation for one question.
    """

    def __init__(
        self,
        db: AsyncSession,
        session_factory: async_sessionmaker[AsyncSession],
        embedder: Embedder | None = None,
        generator: AnswerGenerator | None = None,
        settings: RetrievalSettings | None = None,
    ) -> None:
        """
        Initialize query service.

        Args:
            db: AsyncSession for cache and document reads
            session_factory: Factory for the ranker's per-lookup sessions
            embedder: Embedding capability (Gemini if None)
            generator: Answer generation capability (Gemini if None)
            settings: Retrieval settings (defaults from environment)
        """
        self.db = db
        self._session_factory = session_factory
        self._embedder = embedder
        self._generator = generator
        self._settings = settings or get_settings().retrieval
        self._cache = AnswerCache(db, settings=self._settings)
        self._ranker = HybridRanker(session_factory, settings=self._settings)

    @property
    def embedder(self) -> Embedder:
        """Lazy-load the embedder to avoid initialization cost."""
        if self._embedder is None:
            from docqa.core.document_processing.embeddings_wrapper import GeminiEmbedder

            self._embedder = GeminiEmbedder()
        return self._embedder

    @property
    def generator(self) -> AnswerGenerator:
        """Lazy-load the answer generator."""
        if self._generator is None:
            from docqa.core.rag_query.answer_generator import GeminiAnswerGenerator

            self._generator = GeminiAnswerGenerator()
        return self._generator

    def validate_question(self, question: str) -> str:
        """
        Trim and check a question.

        Raises:
            ValidationError: Empty, or longer than the configured maximum
        """
        question = (question or "").strip()
        if not question:
            raise ValidationError("Question is required", field="question")
        if len(question) > self._settings.max_question_length:
            raise ValidationError(
                f"Question too long. Maximum length: {self._settings.max_question_length} characters",
                field="question",
                details={"length": len(question)},
            )
        return question

    async def answer_question(
        self,
        question: str,
        role: Role = Role.EMPLOYEE,
        timeout: float | None = None,
    ) -> QueryAnswer:
        """
        Answer a question from the documents visible to `role`.

        Steps:
        1. Validate the question
        2. Embed it
        3. Return a cached answer when a close enough question exists
        4. Resolve completed documents visible to the role
        5. Rank and hydrate passages
        6. Generate an answer (bounded by `timeout`)
        7. Cache the answer unless it is the insufficient-information reply

        Args:
            question: Question text
            role: Caller role
            timeout: Deadline in seconds for the generation call

        Returns:
            QueryAnswer: Answer with sources

        Raises:
            ValidationError: Invalid question
            EmbeddingUnavailable: Question could not be embedded
            NoAccessibleDocumentsError: No completed document is visible to the role
            RetrievalError: Both lookups failed
            GenerationUnavailable: Generation failed or exceeded the deadline
        """
        question = self.validate_question(question)
        role = Role(role)

        question_vector = await self.embedder.embed(question)

        if self._settings.cache_enabled:
            hit = await self._lookup_cache(question_vector, role)
            if hit is not None:
                return QueryAnswer(
                    answer=hit.answer,
                    sources=[SourceReference.model_validate(source) for source in hit.sources],
                    cached=True,
                    answered=not is_insufficient_answer(hit.answer),
                )

        document_ids = await document_crud.get_searchable_ids(self.db, role)
        if not document_ids:
            raise NoAccessibleDocumentsError(role.value)

        ranked = await self._ranker.search(question, question_vector, document_ids)
        passages = await ChunkStore(self.db).get_passages(ranked)
        if not passages:
            logger.info(
                f"{__name__}:answer_question - No relevant passages",
                extra={"role": role.value, "document_count": len(document_ids)},
            )
            return QueryAnswer(answer=INSUFFICIENT_INFORMATION, sources=[], answered=False)

        answer = await self._generate(question, passages, timeout)
        sources = self._build_sources(passages)
        answered = not is_insufficient_answer(answer)

        if answered and self._settings.cache_enabled:
            await self._save_to_cache(question, question_vector, answer, sources, role)

        logger.info(
            f"{__name__}:answer_question - Answer generated",
            extra={"role": role.value, "source_count": len(sources), "answered": answered},
        )
        return QueryAnswer(answer=answer, sources=sources, answered=answered)

    async def _lookup_cache(self, question_vector: list[float], role: Role) -> CacheHit | None:
        """Cache failures count as a miss."""
        try:
            return await self._cache.lookup(question_vector, role)
        except Exception as e:
            logger.warning(
                f"{__name__}:_lookup_cache - Cache lookup failed, continuing without cache",
                extra={"error_type": type(e).__name__, "error_msg": str(e)},
            )
            await self.db.rollback()
            return None

    async def _generate(self, question: str, passages: list[Passage], timeout: float | None) -> str:
        if timeout is None:
            return await self.generator.answer(question, passages)
        try:
            return await asyncio.wait_for(self.generator.answer(question, passages), timeout=timeout)
        except asyncio.TimeoutError:
            raise GenerationUnavailable(
                "Answer generation timed out",
                {"timeout": timeout},
            ) from None

    def _build_sources(self, passages: list[Passage]) -> list[SourceReference]:
        return [
            SourceReference(
                document_id=passage.document_id,
                filename=passage.filename,
                chunk_content=passage.content[: self._settings.snippet_length],
                relevance_score=passage.relevance_score,
                search_type=passage.search_type,
            )
            for passage in passages
        ]

    async def _save_to_cache(
        self,
        question: str,
        question_vector: list[float],
        answer: str,
        sources: list[SourceReference],
        role: Role,
    ) -> None:
        """Cache failures never fail the query."""
        try:
            await self._cache.save(
                question=question,
                question_vector=question_vector,
                answer=answer,
                sources=[source.model_dump(mode="json") for source in sources],
                role=role,
            )
        except Exception as e:
            logger.warning(
                f"{__name__}:_save_to_cache - Failed to cache answer",
                extra={"error_type": type(e).__name__, "error_msg": str(e)},
            )
