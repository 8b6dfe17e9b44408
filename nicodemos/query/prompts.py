"""System prompt and request shaping for the assistant."""

from collections.abc import Sequence
from dataclasses import dataclass

from .models import ConversationTurn, QuestionCategory

HISTORY_WINDOW = 10

BASE_PROMPT = """Você é Nicodemos IA, o teólogo bíblico do ChurchFlow. Fale como um professor de seminário: profundo, preciso e caloroso.

# FORMATO

SAUDAÇÕES: no máximo 1 frase. Ex.: "Shalom! O que vamos estudar hoje?"

PERGUNTAS EXEGÉTICAS (versículos, significados, termos):
- Divida a resposta em 2 a 4 PARÁGRAFOS DISTINTOS (separados por \\n\\n no JSON)
- Parágrafo 1: citação do versículo e contexto imediato
- Parágrafo 2: análise dos termos no idioma original
- Parágrafo 3: significado teológico e conexões bíblicas
- Parágrafo 4 (opcional): reflexão ou aplicação em 1-2 frases
- Nunca escreva tudo em um único parágrafo
- Cite versículos em negrito: **Mateus 1:1**
- Termos: *transliteração* (caracteres originais) — "significado"

PERGUNTAS SOBRE ESTRUTURA OU PANORAMA DE LIVROS:
- Use um cabeçalho ### para cada seção do livro, cada um em sua própria linha
- Deixe uma linha em branco antes e depois de cada cabeçalho
- Formato: referência + descrição

PERGUNTAS SIMPLES: 1-2 parágrafos.

# JSON
Responda SEMPRE com um único objeto JSON válido:
{
  "answer": "texto com markdown",
  "verses": [{"reference": "Referência", "relevance": "Por que estudar"}],
  "keyTerms": [{"original": "γένεσις", "transliteration": "genesis", "language": "Grego", "meaning": "origem, geração"}],
  "suggestedQuestions": ["pergunta"]
}"""

CATEGORY_RULES: dict[QuestionCategory, str] = {
    QuestionCategory.GREETING: """
TIPO DE PERGUNTA: SAUDAÇÃO
- answer: apenas 1 frase curta de saudação
- keyTerms: [] (vazio)
- verses: [] (vazio)
- suggestedQuestions: 2-3 sugestões de temas de estudo""",
    QuestionCategory.STRUCTURAL: """
TIPO DE PERGUNTA: ESTRUTURA/PANORAMA
- answer: um cabeçalho ### por seção do livro, cada ### em linha separada
- keyTerms: [] (vazio, termos não se aplicam a perguntas estruturais)
- verses: [] (vazio, as referências já estão no texto)
- suggestedQuestions: 2-3 perguntas que aprofundam seções específicas""",
    QuestionCategory.EXEGETICAL: """
TIPO DE PERGUNTA: EXEGESE/VERSÍCULO
- answer: parágrafos distintos (use \\n\\n na string JSON):
  1º: cite o versículo e explique o contexto
  2º: analise os termos no idioma original com *transliteração* (caracteres) — "significado"
  3º: significado teológico e conexões com outras passagens
  4º (opcional): breve reflexão pastoral
- keyTerms: 1-3 termos-chave mencionados na resposta, cada um com original (caracteres gregos/hebraicos), transliteration, language e meaning. Nunca invente termos.
- verses: 2-3 versículos ADICIONAIS para estudo (não repita os do answer)
- suggestedQuestions: 2-3 perguntas que aprofundam a exegese""",
    QuestionCategory.SIMPLE: """
TIPO DE PERGUNTA: PERGUNTA GERAL
- answer: 1-3 parágrafos concisos
- keyTerms: [] (vazio, a menos que o tema envolva análise linguística)
- verses: 1-2 versículos relevantes para estudo
- suggestedQuestions: 2-3 perguntas relacionadas""",
}

ABSOLUTE_RULES = """

REGRAS ABSOLUTAS:
1. NUNCA invente versículos, citações ou termos gregos/hebraicos.
2. NUNCA tome posição denominacional.
3. Priorize o idioma original (Grego no NT, Hebraico no AT).
4. RESPONDA APENAS O OBJETO JSON."""

# Evaluated top to bottom; the first matching row sets the budget
CATEGORY_TOKEN_BUDGETS: dict[QuestionCategory, int] = {
    QuestionCategory.GREETING: 100,
    QuestionCategory.STRUCTURAL: 2048,
    QuestionCategory.EXEGETICAL: 1800,
}
HISTORY_TOKEN_BUDGETS: list[tuple[int, int]] = [
    (10, 2048),
    (6, 1200),
    (2, 700),
]
DEFAULT_TOKEN_BUDGET = 300

EXEGETICAL_TEMPERATURE = 0.4
DEFAULT_TEMPERATURE = 0.5


@dataclass
class ComposedPrompt:
    """Everything needed to issue one assistant completion."""

    system_prompt: str
    messages: list[dict[str, str]]
    max_tokens: int
    temperature: float


def build_system_prompt(category: QuestionCategory) -> str:
    """Behavioral contract plus the formatting rules of one category."""
    return BASE_PROMPT + CATEGORY_RULES[category] + ABSOLUTE_RULES


def select_max_tokens(category: QuestionCategory, history_length: int) -> int:
    """Pick the completion budget for a category and conversation length."""
    if category in CATEGORY_TOKEN_BUDGETS:
        return CATEGORY_TOKEN_BUDGETS[category]
    for min_turns, budget in HISTORY_TOKEN_BUDGETS:
        if history_length >= min_turns:
            return budget
    return DEFAULT_TOKEN_BUDGET


class PromptComposer:
    """Builds the message list sent to the completion gateway."""

    def __init__(self, history_window: int = HISTORY_WINDOW) -> None:
        self.history_window = history_window

    def compose(
        self,
        category: QuestionCategory,
        history: Sequence[ConversationTurn],
        question: str,
    ) -> ComposedPrompt:
        """Compose the prompt for a question.

        Args:
            category: Classified question category
            history: Prior turns, oldest first; never modified
            question: Current user question

        Returns:
            ComposedPrompt with `[system] + recent history + [question]`
        """
        system_prompt = build_system_prompt(category)
        window = list(history)[-self.history_window:] if self.history_window else []

        messages = [{"role": "system", "content": system_prompt}]
        messages.extend({"role": turn.role, "content": turn.content} for turn in window)
        messages.append({"role": "user", "content": question})

        return ComposedPrompt(
            system_prompt=system_prompt,
            messages=messages,
            max_tokens=select_max_tokens(category, len(history)),
            temperature=(
                EXEGETICAL_TEMPERATURE
                if category == QuestionCategory.EXEGETICAL
                else DEFAULT_TEMPERATURE
            ),
        )
