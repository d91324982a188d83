"""Core building blocks: context, entities, value objects and exceptions."""
