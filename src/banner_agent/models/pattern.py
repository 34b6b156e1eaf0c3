from pydantic import BaseModel, Field


class SizeRange(BaseModel):
    min: float = Field(default=5, ge=0)
    max: float = Field(default=15, ge=0)


class PatternElement(BaseModel):
    shape: str = Field(default="circle", description="circle|line|rectangle|wave")
    count: int = Field(default=20, ge=0, le=500)
    size: SizeRange = SizeRange()
    opacity: float = Field(default=0.1, ge=0, le=1)
    distribution: str = Field(default="random", description="random|grid|radial")


class PatternColors(BaseModel):
    background: list[str] = Field(min_length=2, description="배경 그라디언트 HEX 목록")
    elements: list[str] = Field(min_length=1, description="장식 요소 HEX 목록")


class PatternConfig(BaseModel):
    type: str = Field(default="geometric", description="geometric|organic|abstract")
    elements: list[PatternElement]
    colors: PatternColors
