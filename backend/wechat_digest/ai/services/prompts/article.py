"""
Prompts for WeChat article summary generation
"""

SYSTEM_PROMPT = "你是一个专业的文章分析助手，擅长提取文章要点、分析情感倾向和分类文章主题。请用中文回复。"

SUMMARY_PROMPT_TEMPLATE = """请分析以下微信公众号文章，并按照指定格式输出结果：

文章标题：{title}

文章内容：
{content}

请按照以下JSON格式输出分析结果：
{{
  "summary": "文章的简洁摘要（150字以内）",
  "keyPoints": ["要点1", "要点2", "要点3"],
  "sentiment": "positive/negative/neutral",
  "category": "文章主要分类（如：科技、财经、生活、教育等）"
}}

要求：
1. 摘要要简洁明了，突出核心内容
2. 提取3-5个关键要点
3. 准确判断文章的情感倾向
4. 给出合适的文章分类"""
