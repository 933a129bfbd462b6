from typing import Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class FeishuAuthSettings(BaseModel):
	"""Feishu 应用鉴权配置。"""
	app_id: Optional[str] = Field(default=None, description="Feishu App ID")
	app_secret: Optional[str] = Field(default=None, description="Feishu App Secret")


class FeishuSettings(BaseModel):
	"""Feishu 相关配置。支持嵌套环境变量：
	- TAB_FEISHU__AUTH__APP_ID
	- TAB_FEISHU__AUTH__APP_SECRET
	- TAB_FEISHU__BASE_URL
	- TAB_FEISHU__TIMEOUT_SECONDS
	"""

	auth: FeishuAuthSettings = Field(default_factory=FeishuAuthSettings)
	base_url: str = Field(
		default="https://open.feishu.cn", description="Feishu OpenAPI Base URL"
	)
	timeout_seconds: int = Field(
		default=10, ge=1, le=120, description="HTTP 请求超时时间（秒）"
	)


class RedisSettings(BaseModel):
	"""Redis 配置，用于缓存原始表格数据。优先使用 `url`，否则拼装分段配置。支持：
	- TAB_REDIS__ENABLED / TTL_SECONDS
	- TAB_REDIS__URL
	- TAB_REDIS__HOST / PORT / DB / USERNAME / PASSWORD / SSL
	"""

	enabled: bool = Field(default=False, description="是否启用原始表格缓存")
	ttl_seconds: int = Field(default=300, ge=1, description="缓存 TTL（秒）")
	url: Optional[str] = Field(default=None, description="Redis 连接 URL，优先使用")
	host: str = Field(default="127.0.0.1", description="Redis 主机")
	port: int = Field(default=6379, ge=1, le=65535, description="Redis 端口")
	db: int = Field(default=0, ge=0, description="Redis DB 索引")
	username: Optional[str] = Field(default=None, description="用户名，可选")
	password: Optional[str] = Field(default=None, description="密码，可选")
	ssl: bool = Field(default=False, description="是否启用 SSL")

	@property
	def dsn(self) -> str:
		if self.url:
			return self.url
		scheme = "rediss" if self.ssl else "redis"
		auth_part = ""
		if self.username and self.password:
			auth_part = f"{self.username}:{self.password}@"
		elif self.password and not self.username:
			auth_part = f":{self.password}@"
		return f"{scheme}://{auth_part}{self.host}:{self.port}/{self.db}"


class TableSettings(BaseModel):
	"""表格解析默认值（0-based 行索引）。
	- TAB_TABLE__HEADER_ROW
	- TAB_TABLE__SKIP_ROWS：为空时取 header_row + 1
	- TAB_TABLE__TRANSLITERATION_REPLACEMENT：无法转写的字符替换为该字符串
	"""

	header_row: int = Field(default=0, ge=0, description="表头所在行")
	skip_rows: Optional[int] = Field(default=None, ge=0, description="数据开始行")
	transliteration_replacement: str = Field(default="?", description="转写失败时的替换字符")


class ExportSettings(BaseModel):
	"""导出配置。
	- TAB_EXPORT__DIRECTORY
	"""

	directory: str = Field(default="exports", description="导出 JSON 文件的目录")


class Settings(BaseSettings):

	app_name: str = "Sheet Tabulator API"
	debug: bool = False
	host: str = "127.0.0.1"
	port: int = 8000
	log_level: str = "INFO"

	# 嵌套配置
	feishu: FeishuSettings = Field(default_factory=FeishuSettings)
	redis: RedisSettings = Field(default_factory=RedisSettings)
	table: TableSettings = Field(default_factory=TableSettings)
	export: ExportSettings = Field(default_factory=ExportSettings)

	model_config = SettingsConfigDict(
		env_prefix="TAB_",
		case_sensitive=False,
		env_nested_delimiter="__",
		env_file=".env",
		env_file_encoding="utf-8",
		extra="ignore",
	)


settings = Settings()
