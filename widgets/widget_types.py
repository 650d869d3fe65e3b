from core.plugins import BaseWidget


class TextWidget(BaseWidget):
    slug = "text"
    label = "Text / HTML Block"
    description = "A block of Markdown or HTML text."
    config_schema = {
        "fields": {
            "title": {"type": "string", "label": "Title"},
            "content": {"type": "text", "label": "Content (Markdown)", "default": ""},
        }
    }


class LinkListWidget(BaseWidget):
    slug = "link_list"
    label = "Link List"
    description = "A titled list of links."
    config_schema = {
        "fields": {
            "title": {"type": "string", "label": "Title"},
            "links": {"type": "text", "label": "Links (one URL per line)"},
            "max_items": {"type": "number", "label": "Maximum links shown", "default": 10},
        }
    }


class ImageWidget(BaseWidget):
    slug = "image"
    label = "Image"
    description = "A single image with an optional caption."
    config_schema = {
        "fields": {
            "src": {"type": "string", "label": "Image URL"},
            "alt": {"type": "string", "label": "Alternative text"},
            "caption": {"type": "string", "label": "Caption"},
            "show_caption": {"type": "boolean", "label": "Show caption", "default": True},
        }
    }
