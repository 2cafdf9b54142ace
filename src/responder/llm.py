from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Optional, Protocol, Sequence

from .errors import AiUnavailable, ConfigError
from .types import ConversationTurn

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are a helpful office assistant chatbot. You can help with:
- Scheduling meetings and appointments
- Setting reminders and deadlines
- Managing to-do lists
- Providing daily briefings
- Answering general office questions

Keep responses concise and professional. When users ask to schedule something or set reminders, ask for specific details like date, time, and description."""


class AiResponder(Protocol):
    def is_configured(self) -> bool: ...

    def complete(self, system_prompt: str, history: Sequence[ConversationTurn], message: str) -> str: ...


def build_messages(
    system_prompt: str,
    history: Sequence[ConversationTurn],
    message: str,
) -> List[Dict[str, str]]:
    messages = [{"role": "system", "content": system_prompt}]
    messages.extend({"role": turn.role, "content": turn.content} for turn in history)
    messages.append({"role": "user", "content": message})
    return messages


class OpenAIResponder:
    """Chat completions against an OpenAI-compatible endpoint."""

    name = "openai"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "gpt-3.5-turbo",
        base_url: Optional[str] = None,
        max_tokens: int = 150,
        temperature: float = 0.7,
        timeout: Optional[float] = 15.0,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.base_url = base_url
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.timeout = timeout
        self._client = None

    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _ensure_client(self) -> Any:
        if self._client is not None:
            return self._client
        from openai import OpenAI

        kwargs: Dict[str, Any] = {"api_key": self.api_key, "max_retries": 0}
        if self.base_url:
            kwargs["base_url"] = self.base_url
        if self.timeout:
            kwargs["timeout"] = self.timeout
        self._client = OpenAI(**kwargs)
        return self._client

    def complete(self, system_prompt: str, history: Sequence[ConversationTurn], message: str) -> str:
        if not self.is_configured():
            raise AiUnavailable("OpenAI API key is not set")
        try:
            client = self._ensure_client()
            resp = client.chat.completions.create(
                model=self.model,
                messages=build_messages(system_prompt, history, message),
                max_tokens=self.max_tokens,
                temperature=self.temperature,
            )
        except Exception as exc:
            raise AiUnavailable(f"OpenAI request failed: {exc}") from exc
        if not resp.choices:
            raise AiUnavailable("OpenAI returned no choices")
        return (resp.choices[0].message.content or "").strip()


class LocalLLMResponder:
    """Causal LM loaded through transformers on first use."""

    name = "local"

    def __init__(
        self,
        model_id: str,
        quantization: str = "",
        max_new_tokens: int = 150,
        temperature: float = 0.7,
        top_p: float = 0.9,
    ) -> None:
        self.model_id = model_id
        self.quantization = quantization
        self.max_new_tokens = max_new_tokens
        self.temperature = temperature
        self.top_p = top_p
        self._model = None
        self._tokenizer = None

    def is_configured(self) -> bool:
        return bool(self.model_id)

    def _ensure_model(self) -> None:
        if self._model is not None and self._tokenizer is not None:
            return
        import torch
        from transformers import AutoModelForCausalLM, AutoTokenizer, BitsAndBytesConfig  # type: ignore

        quant = (self.quantization or "").lower()
        bnb_config: Optional[BitsAndBytesConfig] = None
        if quant in {"int4", "4bit", "4-bit"}:
            bnb_config = BitsAndBytesConfig(
                load_in_4bit=True,
                bnb_4bit_compute_dtype=torch.float16,
                bnb_4bit_quant_type="nf4",
            )
        elif quant in {"int8", "8bit", "8-bit"}:
            bnb_config = BitsAndBytesConfig(load_in_8bit=True)

        logger.info("Loading local model %s", self.model_id)
        self._tokenizer = AutoTokenizer.from_pretrained(self.model_id)
        self._model = AutoModelForCausalLM.from_pretrained(
            self.model_id,
            device_map="auto",
            quantization_config=bnb_config,
        )
        self._model.eval()

    def complete(self, system_prompt: str, history: Sequence[ConversationTurn], message: str) -> str:
        try:
            self._ensure_model()
        except Exception as exc:
            raise AiUnavailable(f"Local model {self.model_id} could not be loaded: {exc}") from exc

        tokenizer = self._tokenizer
        model = self._model
        if tokenizer is None or model is None:
            raise AiUnavailable("Local model is not loaded")
        try:
            input_ids = tokenizer.apply_chat_template(
                build_messages(system_prompt, history, message),
                add_generation_prompt=True,
                return_tensors="pt",
            )
            input_ids = input_ids.to(model.device)
            outputs = model.generate(
                input_ids,
                max_new_tokens=self.max_new_tokens,
                do_sample=self.temperature > 0,
                temperature=self.temperature,
                top_p=self.top_p,
                pad_token_id=tokenizer.eos_token_id,
            )
        except Exception as exc:
            raise AiUnavailable(f"Local generation failed: {exc}") from exc
        generated = outputs[0][input_ids.shape[-1]:]
        return tokenizer.decode(generated, skip_special_tokens=True).strip()


def build_ai_responder(config: Dict[str, Any]) -> Optional[AiResponder]:
    ai_cfg = config.get("ai", {})
    provider = (ai_cfg.get("provider") or "none").lower()

    if provider == "none":
        return None
    if provider == "openai":
        return OpenAIResponder(
            api_key=ai_cfg.get("api_key") or os.environ.get("OPENAI_API_KEY"),
            model=os.environ.get("LLM_MODEL") or ai_cfg.get("model", "gpt-3.5-turbo"),
            base_url=ai_cfg.get("base_url") or os.environ.get("OPENAI_BASE_URL") or None,
            max_tokens=ai_cfg.get("max_tokens", 150),
            temperature=ai_cfg.get("temperature", 0.7),
            timeout=ai_cfg.get("timeout_sec", 15.0),
        )
    if provider == "local":
        return LocalLLMResponder(
            model_id=os.environ.get("LLM_MODEL") or ai_cfg.get("model", ""),
            quantization=ai_cfg.get("quantization", ""),
            max_new_tokens=ai_cfg.get("max_tokens", 150),
            temperature=ai_cfg.get("temperature", 0.7),
        )
    raise ConfigError(f"Unknown AI provider: {provider}")
