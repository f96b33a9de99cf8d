"""
Prompts for channel digests and quick recaps.
"""

DIGEST_SYSTEM_PROMPT = (
    "You are a helpful assistant that specializes in analyzing team communications "
    "and creating concise, actionable summaries."
)

DIGEST_USER_PROMPT_TEMPLATE = """
You are analyzing messages from the Slack channel #{channel_name}. Please provide a comprehensive summary with the following structure:

**DAILY SUMMARY**
- Key topics discussed
- Important decisions made
- Progress updates mentioned

**ACTION ITEMS**
- List specific tasks mentioned
- Include assignees if mentioned
- Note deadlines if specified

**SENTIMENT ANALYSIS**
- Overall team mood (positive/neutral/negative)
- Any concerns or blockers mentioned

**KEY PARTICIPANTS**
- Most active contributors
- Subject matter experts involved

Here are the messages to analyze:

{messages_text}

Please format your response in clear sections using markdown formatting.
"""

RECAP_SYSTEM_PROMPT = (
    "You are a helpful assistant that creates brief, actionable recaps of team conversations."
)

RECAP_USER_PROMPT_TEMPLATE = """
Provide a quick recap of the recent messages from #{channel_name}:

**QUICK SUMMARY**
- What was discussed (2-3 bullet points)
- Any immediate action items
- Current status/progress

**NEXT STEPS**
- What needs to happen next
- Who should follow up

Keep it concise and actionable.

Messages:
{messages_text}
"""
