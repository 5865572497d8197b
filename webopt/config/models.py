from pathlib import Path
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator

class GeneralConfig(BaseModel):
    input_dir: Path = Path("videos")
    output_dir: Path = Path("optimized")
    extensions: List[str] = Field(default_factory=lambda: [".mp4"])
    max_seconds: Optional[int] = Field(default=None, gt=0)
    threads: int = Field(default=1, gt=0)
    size_target_mb: Optional[float] = Field(default=3.0, gt=0)
    ffmpeg_bin: str = "ffmpeg"
    ffprobe_bin: str = "ffprobe"
    clean_pass_logs: bool = False
    debug: bool = False

    @field_validator('extensions')
    @classmethod
    def normalize_extensions(cls, v: List[str]) -> List[str]:
        if not v:
            raise ValueError("At least one input extension is required.")
        return [ext if ext.startswith(".") else f".{ext}" for ext in v]

class ScaleConfig(BaseModel):
    max_width: int = Field(default=1280, gt=0)
    max_height: int = Field(default=720, gt=0)

    @property
    def filter(self) -> str:
        return (
            f"scale='min({self.max_width},iw)':'min({self.max_height},ih)'"
            ":force_original_aspect_ratio=decrease"
        )

class WebmConfig(BaseModel):
    video_codec: str = "libvpx-vp9"
    video_bitrate: str = "1M"
    crf: int = Field(default=35, ge=0, le=63)
    audio_codec: str = "libopus"
    audio_bitrate: str = "128k"

class Mp4Config(BaseModel):
    video_codec: str = "libx264"
    crf: int = Field(default=28, ge=0, le=51)
    preset: str = "slow"
    faststart: bool = True

class PosterConfig(BaseModel):
    timestamp: float = Field(default=1.0, ge=0.0)
    quality: int = Field(default=2, ge=1, le=31)

class AppConfig(BaseModel):
    general: GeneralConfig = Field(default_factory=GeneralConfig)
    scale: ScaleConfig = Field(default_factory=ScaleConfig)
    webm: WebmConfig = Field(default_factory=WebmConfig)
    mp4: Mp4Config = Field(default_factory=Mp4Config)
    poster: PosterConfig = Field(default_factory=PosterConfig)
