from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class GenerationSource(str, Enum):
    """생성 결과가 실제 API 응답인지, 어떤 이유의 fallback인지 나타냅니다."""

    LIVE = "live"
    NO_CREDENTIAL = "no_credential"
    API_ERROR = "api_error"
    NETWORK_ERROR = "network_error"
    MALFORMED_REPLY = "malformed_reply"
    INVALID_PROMPT = "invalid_prompt"


class DesignColors(BaseModel):
    primary: str = Field(default="#4B0082", description="메인 브랜드 컬러 (HEX)")
    secondary: str = Field(default="#f4b942", description="강조 컬러 (HEX)")
    text: str = Field(default="#ffffff", description="텍스트 컬러 (HEX)")


class DesignStyle(BaseModel):
    mood: str = Field(default="modern", description="디자인 무드 (예: luxurious, modern, playful)")
    elements: list[str] = Field(default_factory=list, description="장식 요소 키워드")


class Design(BaseModel):
    colors: DesignColors = DesignColors()
    style: DesignStyle = DesignStyle()


class GeneratedContent(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    top_label: str = Field(default="FEATURED", alias="topLabel")
    main_heading: str = Field(default="Premium Quality", alias="mainHeading")
    description: str = "Experience excellence in every detail"
    tagline: str = "Elevate Your Style"
    cta_text: str = Field(default="LEARN MORE", alias="ctaText")
    design: Design = Design()
