from ansispan.settings import SchemaDict

SCHEMA: list[SchemaDict] = [
    {
        "key": "render",
        "title": "Rendering",
        "type": "object",
        "fields": [
            {
                "key": "table",
                "title": "Style table",
                "help": "Tokens used to style segments.",
                "type": "choices",
                "choices": ["tailwind", "textual"],
                "default": "tailwind",
            },
            {
                "key": "container-class",
                "title": "Container class",
                "help": "Class of the element which wraps the rendered text.",
                "type": "string",
                "default": "flex justify-center",
            },
            {
                "key": "pre-class",
                "title": "Preformatted class",
                "help": "Class of the preformatted text element.",
                "type": "string",
                "default": "",
            },
            {
                "key": "separator",
                "title": "Class separator",
                "help": "Joins the tokens of a segment.",
                "type": "string",
                "default": " ",
            },
        ],
    },
    {
        "key": "cache",
        "title": "Cache",
        "type": "object",
        "fields": [
            {
                "key": "size",
                "title": "Cache size",
                "help": "Maximum number of conversions to remember.",
                "type": "integer",
                "default": 256,
                "validate": [{"type": "minimum", "value": 1}],
            }
        ],
    },
]
