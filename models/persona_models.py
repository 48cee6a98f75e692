"""
请求/响应模型定义 (与前端 JSON 字段保持一致)
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class ChatMessage(BaseModel):
    role: Literal["system", "user"]
    content: str


class PersonaRequest(BaseModel):
    """必填字段在业务层校验，缺失时返回各角色自己的提示语"""

    model_config = ConfigDict(populate_by_name=True)


class StoryRequest(PersonaRequest):
    beast: Optional[str] = Field(None, description="神兽名称")
    poem_title: Optional[str] = Field(None, alias="poemTitle", description="诗题")
    poet: Optional[str] = Field(None, description="作者")
    poem_text: Optional[str] = Field(None, alias="poemText", description="诗文")


class DialogueRequest(PersonaRequest):
    question: Optional[str] = Field(None, description="向东坡提出的问题")


class ContinuationRequest(PersonaRequest):
    first_line: Optional[str] = Field(None, alias="firstLine", description="用户写下的第一句")
    mood: Optional[str] = Field("自由", description="情绪，未知值按自然流露处理")


class StoryResponse(BaseModel):
    story: str


class DialogueResponse(BaseModel):
    answer: str


class ContinuationResponse(BaseModel):
    continuation: str



class HealthResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: str = Field(..., description="服务状态")
    time: str = Field(..., description="服务器时间 (ISO-8601)")
    env: str = Field(..., description="hosted 或 local")
    has_key: bool = Field(..., alias="hasKey", description="是否已配置 KIMI_API_KEY")
    model: str = Field(..., description="上游模型")
