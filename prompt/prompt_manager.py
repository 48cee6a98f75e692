"""
角色提示词管理
系统提示词定义角色与输出格式，用户提示词填入本次请求的内容
"""

from typing import Dict, List, Optional

from models.persona_models import (
    ChatMessage,
    ContinuationRequest,
    DialogueRequest,
    StoryRequest,
)

DEFAULT_MOOD = "自由"
DEFAULT_MOOD_PHRASE = "自然流露"

MOOD_PROMPTS: Dict[str, str] = {
    "孤独": "带着淡淡的孤寂与思念",
    "漂泊": "充满行旅的苍凉与不羁",
    "喜悦": "明快而充满生机",
    "思念": "柔软而深情的相思",
    "自由": "豁达洒脱、随心所欲",
}


class PromptManager:
    """三个角色的提示词模板"""

    def __init__(self, mood_prompts: Optional[Dict[str, str]] = None):
        self.mood_prompts = dict(mood_prompts or MOOD_PROMPTS)

    def get_mood_phrase(self, mood: Optional[str]) -> str:
        """未知情绪不算错误，统一使用自然流露"""
        if mood is None:
            mood = DEFAULT_MOOD
        return self.mood_prompts.get(mood, DEFAULT_MOOD_PHRASE)

    def build_messages(self, persona: str, request) -> List[ChatMessage]:
        if persona == "story":
            return self.build_story_messages(request)
        elif persona == "dialogue":
            return self.build_dialogue_messages(request)
        elif persona == "continuation":
            return self.build_continuation_messages(request)
        raise ValueError(f"未知角色: {persona}")

    def build_story_messages(self, request: StoryRequest) -> List[ChatMessage]:
        system_prompt = f"""
你是一位中国传统神兽，名字是【{request.beast}】。
听众是 6-10 岁的孩子。
讲故事要求：
1. 温柔、简单、有画面感
2. 用“我带你看……”讲诗
3. 讲成一个完整的小故事
4. 字数 120~180 字
"""

        user_prompt = f"""
这首诗是《{request.poem_title}》，作者是{request.poet}：

{request.poem_text}

请你作为{request.beast}讲一个诗里的故事。
"""
        return [
            ChatMessage(role="system", content=system_prompt),
            ChatMessage(role="user", content=user_prompt),
        ]

    def build_dialogue_messages(self, request: DialogueRequest) -> List[ChatMessage]:
        system_prompt = """
你是北宋文豪苏轼，字子瞻，号东坡居士。
性格豁达、通透、有文人风骨。
请以第一人称，用偏文言但现代人可读的方式回答。
字数 100~150 字。
"""
        return [
            ChatMessage(role="system", content=system_prompt),
            ChatMessage(role="user", content=request.question),
        ]

    def build_continuation_messages(self, request: ContinuationRequest) -> List[ChatMessage]:
        mood_phrase = self.get_mood_phrase(request.mood)

        system_prompt = f"""
你是古代诗人的灵魂，正在与现代人隔空合写一首新诗。
用户会给你开头一句，你只需续写三句（共四句成一绝句）。
要求：
- 严格遵循近体诗格律（五言或七言统一，与开头一句字数相同）
- 意境与用户开头契合，情绪{mood_phrase}
- 语言古雅但现代人可读
- 不要解释，不要加标点说明
- 只输出三句诗，不要有其他文字
"""

        user_prompt = f"我的开头是：{request.first_line}\n请续写三句。"
        return [
            ChatMessage(role="system", content=system_prompt),
            ChatMessage(role="user", content=user_prompt),
        ]


_prompt_manager: Optional[PromptManager] = None


def get_prompt_manager() -> PromptManager:
    """返回全局 PromptManager"""
    global _prompt_manager
    if _prompt_manager is None:
        _prompt_manager = PromptManager()
    return _prompt_manager
