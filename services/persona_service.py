"""
角色生成服务
校验 → 组装提示词 → 调用上游 → 映射结果，三个接口共用同一流程
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple
import logging

from models.persona_models import PersonaRequest
from prompt.prompt_manager import PromptManager, get_prompt_manager
from providers.llm_provider import LLMProvider, UpstreamTimeoutError, extract_content

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PersonaSpec:
    name: str
    path: str
    response_field: str
    required_fields: Tuple[str, ...]  # 模型属性名
    missing_message: str
    fallback: str
    temperature: float = 0.8
    max_tokens: Optional[int] = None

    def missing_fields(self, request: PersonaRequest) -> Tuple[str, ...]:
        missing = []
        for field in self.required_fields:
            value = getattr(request, field, None)
            if not isinstance(value, str) or not value.strip():
                missing.append(field)
        return tuple(missing)

    def reply(self, text: str) -> Dict[str, str]:
        return {self.response_field: text}


@dataclass
class PersonaReply:
    status_code: int
    body: Dict[str, Any]


STORY = PersonaSpec(
    name="story",
    path="/api/kids/story",
    response_field="story",
    required_fields=("beast", "poem_title", "poet", "poem_text"),
    missing_message="缺少参数",
    fallback="神兽今天有点害羞，一会再来讲。",
    temperature=0.8,
)

DIALOGUE = PersonaSpec(
    name="dialogue",
    path="/api/sushi",
    response_field="answer",
    required_fields=("question",),
    missing_message="缺少问题参数",
    fallback="风雨太大，东坡暂未回应。",
    temperature=0.8,
)

CONTINUATION = PersonaSpec(
    name="continuation",
    path="/api/creation/continue",
    response_field="continuation",
    required_fields=("first_line",),
    missing_message="请先写下你的开头哦～",
    fallback="墨汁晕开了，\n古人暂未落笔。\n稍候再试吧。",
    temperature=0.9,
    max_tokens=100,
)

PERSONAS: Dict[str, PersonaSpec] = {spec.name: spec for spec in (STORY, DIALOGUE, CONTINUATION)}
PERSONAS_BY_PATH: Dict[str, PersonaSpec] = {spec.path: spec for spec in PERSONAS.values()}


class PersonaService:
    """角色生成服务"""

    def __init__(self, provider: LLMProvider, prompt_manager: Optional[PromptManager] = None):
        self.provider = provider
        self.prompt_manager = prompt_manager or get_prompt_manager()

    def invalid_reply(self, persona: PersonaSpec) -> PersonaReply:
        return PersonaReply(status_code=400, body=persona.reply(persona.missing_message))

    async def run(self, persona: PersonaSpec, request: PersonaRequest) -> PersonaReply:
        missing = persona.missing_fields(request)
        if missing:
            logger.info(f"{persona.name} 请求缺少字段: {', '.join(missing)}")
            return self.invalid_reply(persona)

        messages = self.prompt_manager.build_messages(persona.name, request)

        try:
            data = await self.provider.complete(
                messages,
                temperature=persona.temperature,
                max_tokens=persona.max_tokens,
            )
        except UpstreamTimeoutError as e:
            logger.warning(f"{persona.name} 生成超时，返回兜底文案: {e}")
            return PersonaReply(status_code=500, body=persona.reply(persona.fallback))
        except Exception as e:
            logger.error(f"{persona.name} 生成失败: {type(e).__name__}: {e}", exc_info=True)
            return PersonaReply(status_code=500, body=persona.reply(persona.fallback))

        content = (extract_content(data) or "").strip()
        if not content:
            logger.warning(f"{persona.name} 上游返回空内容，使用兜底文案")
            content = persona.fallback

        return PersonaReply(status_code=200, body=persona.reply(content))
