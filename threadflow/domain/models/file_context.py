from typing import Any, Dict, Optional, Union
from pydantic import BaseModel, Field


class FileContext(BaseModel):
    """Context contributed by an uploaded file or a connected image node"""
    file_id: str = Field(description="Unique file or node identifier")
    file_name: Optional[str] = None
    content: Optional[Union[str, Dict[str, Any]]] = Field(
        None,
        description="Raw text, a {'full_text': ...} payload, or an image payload"
    )
    context_prompt: Optional[str] = Field(None, description="User supplied description of the file")
    summary: Optional[str] = None
    type: Optional[str] = None

    @property
    def image_url(self) -> Optional[str]:
        """URL of the image payload, if this context carries one"""
        if not isinstance(self.content, dict):
            return None
        content_type = str(self.content.get("type") or "")
        if self.type != "image" and content_type != "image" and not content_type.startswith("image/"):
            return None
        url = self.content.get("url") or self.content.get("image_url")
        if isinstance(url, str) and url:
            return url
        return None

    @property
    def full_text(self) -> Optional[str]:
        if isinstance(self.content, dict):
            return self.content.get("full_text") or None
        return None
