# Prompt templates for website code generation
# Each framework asks for a fixed set of fenced blocks that services/response_parser.py understands

COMPLETENESS_FOOTER = "Make sure the code is complete, functional, and follows best practices."

INITIAL_PROMPT = """Generate code for a {framework_label}website based on this description: {user_prompt}

If provided, use these options: {options_json}

{framework_instructions}

{footer}"""

REFINEMENT_CONTEXT = """
I previously created a website based on the user's requirements. Here's our conversation history:

{conversation_context}

Now the user wants the following changes:
{user_prompt}

Please update the website code accordingly.
"""

REFINEMENT_PROMPT = """{refinement_context}

Please provide the COMPLETE updated code for a {framework_label}website.

{framework_instructions}

{footer}
Include ALL the previous functionality plus the requested changes.
Do not omit any parts of the previous code unless explicitly asked to remove them."""

VANILLA_INSTRUCTIONS = """Please provide the code in three separate sections:
1. HTML code (wrapped in ```html tags)
2. CSS code (wrapped in ```css tags)
3. JavaScript code (wrapped in ```javascript tags)"""

FRAMEWORK_INSTRUCTIONS_TEMPLATE = """Please provide the code in the following format:
1. {main_description} (wrapped in ```{main_tag} tags)
2. {second_block}
3. package.json (wrapped in ```json tags)
4. Any additional configuration files needed (each wrapped in ``` tags with appropriate file extension)

{guidance}"""

FRAMEWORK_PROMPTS = {
    "vanilla": {
        "main_tag": "html",
        "required_blocks": ["html", "css", "javascript"],
        "instructions": VANILLA_INSTRUCTIONS,
    },
    "react": {
        "main_tag": "jsx",
        "required_blocks": ["jsx"],
        "instructions": FRAMEWORK_INSTRUCTIONS_TEMPLATE.format(
            main_description="Main React component code",
            main_tag="jsx",
            second_block="CSS code (wrapped in ```css tags)",
            guidance="Use modern React practices with hooks and functional components. Include proper imports and exports.",
        ),
    },
    "vue": {
        "main_tag": "vue",
        "required_blocks": ["vue"],
        "instructions": FRAMEWORK_INSTRUCTIONS_TEMPLATE.format(
            main_description="Vue component files",
            main_tag="vue",
            second_block="Additional CSS if needed (wrapped in ```css tags)",
            guidance="Use Vue 3 with Composition API. Include proper imports and exports.",
        ),
    },
    "svelte": {
        "main_tag": "svelte",
        "required_blocks": ["svelte"],
        "instructions": FRAMEWORK_INSTRUCTIONS_TEMPLATE.format(
            main_description="Svelte component files",
            main_tag="svelte",
            second_block="Additional CSS if needed (wrapped in ```css tags)",
            guidance="Use Svelte's reactive declarations and stores appropriately. Include proper imports and exports.",
        ),
    },
    "astro": {
        "main_tag": "astro",
        "required_blocks": ["astro"],
        "instructions": FRAMEWORK_INSTRUCTIONS_TEMPLATE.format(
            main_description="Astro component files",
            main_tag="astro",
            second_block="Additional components if needed (wrapped in appropriate ``` tags)",
            guidance="Use Astro's partial hydration with appropriate client directives. Include proper imports and exports.",
        ),
    },
}

FRAMEWORK_EMOJI = {
    "react": "⚛️",
    "vue": "🟢",
    "svelte": "🔥",
    "astro": "🚀",
    "vanilla": "🌐",
}

# Assistant replies shown in the conversation
INITIAL_ACKNOWLEDGEMENT = (
    "I've created your website based on your description. "
    "Check the preview, and tell me what you'd like to change."
)
REFINEMENT_ACKNOWLEDGEMENT = "I've updated the website with your requested changes. Let me know if you'd like anything else adjusted."
GENERATION_ERROR_MESSAGE = "Sorry, there was an error generating your code. Please try again."
RESTORE_MESSAGE = "Restored the version from {timestamp} (\"{prompt}\")."
