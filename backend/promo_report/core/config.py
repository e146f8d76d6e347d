"""Application configuration and settings management."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SYSTEM_PROMPT = "You are a luxury retail and duty-free sales expert analyzing competitor data."

DEFAULT_ANALYSIS_PROMPT = """You are a luxury retail and duty-free sales expert. Analyze the following competitor's staff sales incentive data to help our brand compete effectively.

COMPETITOR DATA:
{extracted_text}

OUTPUT REQUIREMENTS:

First, produce a table with the following:
1. Group data by incentive type and brand.
2. Include these columns:
   * Brand (name of the competitor brand)
   * Location of promotion (e.g., Terminal 1, Terminal 2, Wing, Arrival, etc.)
   * Eligible staff (e.g., BA, payroll staff, etc.)
   * Incentive type (e.g., Cash, Voucher, Product)
   * Incentive description (brief details of the incentive - list every permutation of the incentive)
   * List of all relevant SKUs or products tied to the incentive

Then, provide a list of recommendations & analysis with the following format:
1. Which are the top 3 most attractive incentives across all brands?
2. What are the top 3 best strategies to compete against the top incentives?
3. How do we make sure these 3 strategies are easy to explain and convincing for general sales staff?

DATA RULES:
1. Classify incentive types as: cash, voucher, product, or other identifiable types from the data.
2. Sort the table by brand name alphabetically (A-Z).
3. Ensure each row represents a unique incentive type per brand.

ADDITIONAL INSTRUCTIONS:
* If the data is incomplete or unclear, make reasonable assumptions based on luxury retail norms and note them.
* If SKUs/products are not explicitly listed, infer relevant product categories from the context where possible.
* Format ONLY the table section using markdown with the | syntax for better document generation.
* For the recommendations and analysis section, use plain text without markdown formatting, don't use ** or other markdown formatting.
* Be very precise with numbers and currency values - double-check all numerical values for accuracy."""


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="PROMO_REPORT_",
        extra="ignore",
        populate_by_name=True,
    )

    app_name: str = Field(default="Promotion Report API", description="Human readable application name.")
    environment: Literal["local", "development", "staging", "production"] = Field(
        default="local",
        description="Deployment environment name.",
    )
    log_level: str = Field(default="INFO", description="Root logging level.")
    upload_dir: Path = Field(
        default=Path("uploads"),
        description="Directory holding one sub-directory per report session.",
    )
    llm_base_url: str = Field(
        default="https://api.deepseek.com/v1",
        description="Base URL of the OpenAI compatible chat completions API.",
    )
    llm_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("PROMO_REPORT_LLM_API_KEY", "DEEPSEEK_API_KEY"),
        description="Bearer token sent to the language model API.",
    )
    analysis_model: str = Field(default="deepseek-reasoner", description="Model used for the analysis.")
    llm_max_tokens: int = Field(default=4000, description="Upper bound for the generated analysis.")
    llm_timeout: float = Field(default=300.0, description="Timeout in seconds for a single LLM call.")
    system_prompt: str = Field(default=DEFAULT_SYSTEM_PROMPT, description="System message for the analysis.")
    analysis_prompt_template: str = Field(
        default=DEFAULT_ANALYSIS_PROMPT,
        description="User prompt; '{extracted_text}' is replaced with the OCR output.",
    )
    ocr_language: str = Field(default="eng", description="Tesseract language code.")
    ocr_engine_mode: int = Field(default=1, description="Tesseract OEM (1 = LSTM only).")
    ocr_page_segmentation_mode: int = Field(default=3, description="Tesseract PSM (3 = automatic).")
    ocr_char_whitelist: str | None = Field(
        default="abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789$.,-%",
        description="Characters Tesseract is allowed to emit; empty disables the whitelist.",
    )
    progress_ttl_seconds: float = Field(
        default=60.0,
        description="How long finished OCR progress stays visible to pollers.",
    )
    max_upload_bytes: int = Field(
        default=10 * 1024 * 1024,
        description="Maximum combined size of the images of one upload.",
    )
    report_title: str = Field(
        default="Competitor Analysis Report",
        description="Title printed at the top of the generated report.",
    )


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings."""

    return Settings()
