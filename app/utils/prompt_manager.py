from pathlib import Path
from typing import Dict, Optional

PROMPTS_DIR = Path(__file__).parent.parent / "prompts"  # app/utils -> app/prompts


class PromptTemplate:
    """Шаблон промпта в .md файле, подстановка через str.format"""

    def __init__(self, template_path: Path):
        self.template_path = Path(template_path)
        self._template: Optional[str] = None

    def load(self) -> str:
        """Загружает шаблон из файла (один раз)"""
        if self._template is None:
            self._template = self.template_path.read_text(encoding="utf-8")
        return self._template

    def format(self, **kwargs) -> str:
        return self.load().format(**kwargs).strip()


class PromptManager:
    """Менеджер промптов приложения"""

    def __init__(self, template_dir: Optional[str] = None):
        self.template_dir = Path(template_dir) if template_dir else PROMPTS_DIR
        self._templates: Dict[str, PromptTemplate] = {}

    def get_template(self, name: str) -> PromptTemplate:
        """Получает шаблон по имени"""
        if name not in self._templates:
            template_path = self.template_dir / f"{name}.md"
            if not template_path.exists():
                raise FileNotFoundError(f"Prompt template '{name}' not found at {template_path}")
            self._templates[name] = PromptTemplate(template_path)
        return self._templates[name]

    def render(self, template_name: str, **kwargs) -> str:
        """Рендерит шаблон с параметрами"""
        return self.get_template(template_name).format(**kwargs)

    def list_templates(self) -> list[str]:
        """Возвращает список доступных шаблонов"""
        if not self.template_dir.exists():
            return []
        return sorted(path.stem for path in self.template_dir.glob("*.md"))


prompt_manager = PromptManager()
