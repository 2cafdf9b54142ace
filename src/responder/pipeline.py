import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from .gate import FUZZY_THRESHOLD, passes_similarity_gate
from .heuristics import DEFAULT_RESPONSE, DEFAULT_RULES, IntentRule, match_intent
from .knowledge import KnowledgeBase
from .llm import SYSTEM_PROMPT, AiResponder, build_ai_responder
from .loader import load_knowledge_file
from .matching import best_fuzzy_match, keyword_match
from .text import normalize_text
from .types import ConversationTurn, Provenance, Reply

logger = logging.getLogger(__name__)

HistoryLike = Iterable[Union[ConversationTurn, Mapping[str, Any]]]

CHAT_ROLES = {"user", "assistant"}


class ChatResponder:
    """Picks a reply for a chat message.

    Stages run in order and the first one that produces text wins:

    1. the AI responder, when one is injected and configured;
    2. the closest knowledge base question, if its similarity clears
       ``fuzzy_threshold``;
    3. the first knowledge base entry with a keyword contained in the message;
    4. the intent rules (greeting, task, reminder, calendar, help, thanks);
    5. a fixed default reply.

    AI failures are logged and fall through to stage 2. A responder built
    without a knowledge base is not ready and answers every message with
    the default reply.
    """

    def __init__(
        self,
        knowledge_base: Optional[KnowledgeBase],
        ai_responder: Optional[AiResponder] = None,
        *,
        fuzzy_threshold: float = FUZZY_THRESHOLD,
        system_prompt: str = SYSTEM_PROMPT,
        rules: Sequence[IntentRule] = DEFAULT_RULES,
        ai_timeout: Optional[float] = None,
        max_history_turns: int = 0,
    ) -> None:
        self.knowledge_base = knowledge_base
        self.ai_responder = ai_responder
        self.fuzzy_threshold = fuzzy_threshold
        self.system_prompt = system_prompt
        self.rules = tuple(rules)
        self.ai_timeout = ai_timeout
        self.max_history_turns = max_history_turns

    @property
    def ready(self) -> bool:
        return self.knowledge_base is not None

    def respond(
        self,
        message: str,
        history: HistoryLike = (),
        ai_responder: Optional[AiResponder] = None,
    ) -> Reply:
        message = message or ""
        if not self.ready:
            return self._not_ready()

        responder = ai_responder or self.ai_responder
        if self._ai_enabled(responder):
            turns = self._normalize_history(history)
            try:
                text = self._complete_with_timeout(responder, turns, message)
            except FutureTimeout:
                logger.warning("AI responder %s timed out after %ss", _name(responder), self.ai_timeout)
            except Exception as exc:
                logger.warning("AI responder %s failed, using fallback: %s", _name(responder), exc)
            else:
                reply = self._ai_reply(responder, text)
                if reply is not None:
                    return reply

        return self.fallback(message)

    async def arespond(
        self,
        message: str,
        history: HistoryLike = (),
        ai_responder: Optional[AiResponder] = None,
    ) -> Reply:
        """Async variant of :meth:`respond`.

        The AI call runs in a worker thread and is bounded by ``ai_timeout``.
        Cancelling the calling task abandons the call and discards its result.
        """
        message = message or ""
        if not self.ready:
            return self._not_ready()

        responder = ai_responder or self.ai_responder
        if self._ai_enabled(responder):
            turns = self._normalize_history(history)
            call = asyncio.to_thread(responder.complete, self.system_prompt, turns, message)
            try:
                text = await asyncio.wait_for(call, timeout=self.ai_timeout)
            except asyncio.TimeoutError:
                logger.warning("AI responder %s timed out after %ss", _name(responder), self.ai_timeout)
            except Exception as exc:
                logger.warning("AI responder %s failed, using fallback: %s", _name(responder), exc)
            else:
                reply = self._ai_reply(responder, text)
                if reply is not None:
                    return reply

        return self.fallback(message)

    def fallback(self, message: str) -> Reply:
        """Stages 2-5: knowledge base, keywords, intent rules, default."""
        lowered = normalize_text(message or "")
        entries = self.knowledge_base.all() if self.knowledge_base is not None else ()

        candidate = best_fuzzy_match(lowered, entries)
        passed, score = passes_similarity_gate(candidate, self.fuzzy_threshold)
        if passed and candidate is not None:
            logger.debug("Fuzzy match %.3f on %r", score, candidate.entry.question)
            return Reply(text=candidate.entry.answer, provenance=Provenance.KB_FUZZY, score=score)

        entry = keyword_match(lowered, entries)
        if entry is not None:
            logger.debug("Keyword match on %r", entry.question)
            return Reply(text=entry.answer, provenance=Provenance.KB_KEYWORD)

        intent = match_intent(lowered, self.rules)
        if intent is not None:
            logger.debug("Intent rule %s matched (refined=%s)", intent.name, intent.refined)
            return Reply(text=intent.text, provenance=Provenance.HEURISTIC, intent=intent.name)

        return Reply(text=DEFAULT_RESPONSE, provenance=Provenance.DEFAULT)

    def ai_configured(self) -> bool:
        return self._ai_enabled(self.ai_responder)

    def _complete_with_timeout(self, responder: AiResponder, turns: List[ConversationTurn], message: str) -> Any:
        if self.ai_timeout is None:
            return responder.complete(self.system_prompt, turns, message)
        # Never wait on a call that has already timed out.
        executor = ThreadPoolExecutor(max_workers=1)
        try:
            future = executor.submit(responder.complete, self.system_prompt, turns, message)
            return future.result(timeout=self.ai_timeout)
        finally:
            executor.shutdown(wait=False)

    @staticmethod
    def _ai_enabled(responder: Optional[AiResponder]) -> bool:
        if responder is None:
            return False
        try:
            configured = responder.is_configured()
        except Exception as exc:
            logger.warning("AI responder %s configuration check failed: %s", _name(responder), exc)
            return False
        if not configured:
            logger.debug("AI responder %s is not configured", _name(responder))
        return bool(configured)

    @staticmethod
    def _ai_reply(responder: AiResponder, text: Any) -> Optional[Reply]:
        if not isinstance(text, str) or not text.strip():
            logger.warning("AI responder %s returned an empty reply, using fallback", _name(responder))
            return None
        return Reply(text=text, provenance=Provenance.AI)

    @staticmethod
    def _not_ready() -> Reply:
        logger.warning("Knowledge base not loaded; returning default reply")
        return Reply(text=DEFAULT_RESPONSE, provenance=Provenance.DEFAULT)

    def _normalize_history(self, history: HistoryLike) -> List[ConversationTurn]:
        turns: List[ConversationTurn] = []
        for msg in history or ():
            if isinstance(msg, ConversationTurn):
                role, content = msg.role, msg.content
            elif isinstance(msg, Mapping):
                role = msg.get("role")
                content = msg.get("content") or msg.get("text")
            else:
                continue
            if role in CHAT_ROLES and isinstance(content, str) and content:
                turns.append(ConversationTurn(role=role, content=content))
        if self.max_history_turns > 0:
            turns = turns[-self.max_history_turns:]
        return turns


def _name(responder: Any) -> str:
    return getattr(responder, "name", type(responder).__name__)


def build_responder(config: Dict[str, Any], data_path: Optional[str] = None) -> ChatResponder:
    source = data_path or config.get("knowledge", {}).get("source", "")
    knowledge_base = load_knowledge_file(source)
    ai_cfg = config.get("ai", {})
    return ChatResponder(
        knowledge_base,
        build_ai_responder(config),
        fuzzy_threshold=config.get("matching", {}).get("fuzzy_threshold", FUZZY_THRESHOLD),
        system_prompt=ai_cfg.get("system_prompt") or SYSTEM_PROMPT,
        ai_timeout=ai_cfg.get("timeout_sec"),
        max_history_turns=ai_cfg.get("max_history_turns", 0),
    )
