"""Prompt construction for identify and revise requests."""

import json
from dataclasses import dataclass

from eat_what.domain.requests import AnalyzeRequest, PromptPlan

SYSTEM_PROMPT = """你是一名营养分析助手。

任务A：识别图片或文字中的所有食物（可多种），估算每种营养（kcal/蛋白/脂肪/碳水）。若份量不确定做常识假设并在notes说明。

任务B：修正时，根据用户的修正指令对当前食物清单进行智能调整：
- "没有XXX" 或 "删除XXX" → 从清单中移除该食物
- "XXX改成YYY" → 替换食物
- "多一份XXX" 或 "减少XXX" → 调整份量
- "只有XXX" → 只保留指定食物，删除其他
- 其他指令按照常理理解执行

请仅返回严格JSON：
{
  "items": [ {"name":"...","protein":0,"fat":0,"carbs":0,"kcal":0} ],
  "notes": "可选修正说明"
}
要求：中文菜名；蛋白/脂肪/碳水可一位小数；kcal为整数。"""

DEFAULT_IDENTIFY_PROMPT = "请从图片识别食物并估算营养成分。"


@dataclass
class PromptBuilder:
    """Select the model and message shape for a request."""

    text_model: str
    vision_model: str
    system_prompt: str = SYSTEM_PROMPT

    def build(self, request: AnalyzeRequest) -> PromptPlan:
        """Return the model and chat messages for the request."""
        user_prompt = build_user_prompt(request)
        if request.image:
            return PromptPlan(
                model=self.vision_model,
                messages=_vision_messages(
                    self.system_prompt, user_prompt, request.image
                ),
            )
        return PromptPlan(
            model=self.text_model,
            messages=[
                {"role": "system", "content": self.system_prompt},
                {"role": "user", "content": user_prompt},
            ],
        )


def build_user_prompt(request: AnalyzeRequest) -> str:
    """Return the user turn: a revision instruction or the identify text."""
    if request.is_revision:
        previous = json.dumps(
            request.prev_json, ensure_ascii=False, separators=(",", ":")
        )
        return (
            f"上一轮JSON：\n{previous}\n\n"
            f"修正指令：{request.text or ''}\n\n"
            "请返回新的严格JSON。"
        )
    return request.text or DEFAULT_IDENTIFY_PROMPT


def _vision_messages(
    system_prompt: str, user_prompt: str, image: str
) -> list[dict[str, object]]:
    """Multi-part messages: the image precedes the instruction text."""
    return [
        {"role": "system", "content": [{"type": "text", "text": system_prompt}]},
        {
            "role": "user",
            "content": [
                {"type": "image_url", "image_url": {"url": image}},
                {"type": "text", "text": user_prompt},
            ],
        },
    ]
