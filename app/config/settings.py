from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "construction"
    db_username: str = "construction"
    db_password: str = "secret"
    db_pool_max_size: int = 10

    job_poll_interval_seconds: int = 5
    stuck_job_timeout_minutes: int = 15
    stuck_job_sweep_interval_seconds: int = 60
    task_queue_backend: str = "database"
    task_queue_workers: int = 2

    ocr_max_pages: int = 50
    ocr_concurrency: int = 3
    ocr_batch_delay_seconds: float = 0.5
    ocr_page_timeout_seconds: int = 45

    pdf_render_engines: str = "pymupdf,pdfplumber"
    pdf_render_scale: float = 2.0
    pdf_render_timeout_seconds: int = 120

    vision_provider: str = "openai"
    vision_openai_api_key: str = ""
    vision_openai_model_name: str = "gpt-4o"
    vision_openai_timeout_seconds: int = 30
    vision_openai_temperature: float = 0.1
    vision_openai_max_tokens: int = 1000
    vision_openai_compatible_base_url: str = ""
    vision_openai_compatible_api_key: str = ""
    vision_openai_compatible_model_name: str = ""

    storage_backend: str = "local"
    storage_files_root: str = "/app/files"
    supabase_url: str = ""
    supabase_service_role_key: str = ""
    supabase_storage_bucket: str = "construction-files"
    storage_timeout_seconds: int = 60

    fcm_server_key: str = ""
    push_timeout_seconds: int = 10

    rate_limit_purge_interval_seconds: int = 60
