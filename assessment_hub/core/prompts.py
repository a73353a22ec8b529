"""
Centralized AI Prompt Repository
- Ensures consistency across assessment types
- Decouples prompts from business logic
"""

# --- ASSESSMENT LABELS ---
ANALYST_FOCUS = {
    "performance": "employee performance reviews",
    "climate": "organizational climate surveys",
    "feedback360": "360-degree feedback evaluations",
}

REPORT_LABEL = {
    "performance": "performance review",
    "climate": "organizational climate survey",
    "feedback360": "360-degree evaluation",
}

# --- ANALYSIS PROMPTS ---
ANALYSIS_SYSTEM_TEMPLATE = (
    "You are an analyst specialised in {focus}. "
    "Analyse the data below and provide valuable insights written in {language}."
)

# Extra instructions, one per AI option switched on for the assessment
ANALYSIS_OPTION_INSTRUCTIONS = {
    "patterns": "Identify relevant patterns and tendencies in the data.",
    "development": "Highlight areas that need development or improvement.",
    "strengths": "Identify evident strengths of the team or organization.",
    "suggestions": "Provide practical suggestions of actions to improve the results.",
    "comparison": "Compare with industry benchmarks when applicable.",
    "trends": "Project future trends based on the current data.",
}

ANALYSIS_USER_TEMPLATE = (
    "Here is the data to analyse:\n{data}\n\n"
    "Return your complete analysis as a JSON object with the fields: "
    '"summary" (overall summary), "patterns" (identified patterns), '
    '"developmentAreas" (areas to develop), "strengths" (strengths), '
    '"suggestions" (improvement suggestions), "trends" (identified trends), '
    '"riskAreas" (risk areas), "recommendedActions" (recommended actions). '
    "Every field except summary is a list of strings."
)

# --- VISUALIZATION PROMPTS ---
VISUALIZATION_SYSTEM = (
    "You are a data-visualization specialist for human resources reporting. "
    "Respond in valid JSON only."
)

VISUALIZATION_USER_TEMPLATE = """Recommend the best visualizations for the data below, collected by a {label}.
Write titles and descriptions in {language}.

Data:
{data}

Respond with this JSON structure:
{{
  "recommendations": [
    {{
      "chartType": "bar|pie|line|radar|heat",
      "title": "Suggested chart title",
      "description": "Why this chart type suits this data",
      "dataFields": ["fields", "to", "use"],
      "config": {{}}
    }}
  ]
}}
"""

# --- FEEDBACK TEXT PROMPTS ---
FEEDBACK_TEXT_TEMPLATE = """Write a detailed feedback text in {language} for a {label} report.

The text must focus specifically on the aspect "{aspect}" and be based on the following data:
{data}

Provide a professional, objective and constructive text that highlights tendencies, insights and practical recommendations.
"""

FEEDBACK_TEXT_FALLBACK = "Feedback could not be generated because of an error."


# helper to build prompts
def get_prompt(template: str, **kwargs) -> str:
    return template.format(**kwargs)
