from daily_stars.library import iter_chapters, load_book
from daily_stars.matching import find_relevant_context
from daily_stars.prompts import compose_augmented_prompt


if __name__ == "__main__":
    book = load_book("data/astrology_book.json")
    questions = [
        "What does Saturn teach about discipline?",
        "How are the twelve houses divided?",
        "Will I win the lottery tomorrow?",
    ]
    matches = {question: find_relevant_context(question, book) for question in questions}
    print(
        {
            "chapters": sum(1 for _ in iter_chapters(book)),
            "matched": {question: match.chapter_title if match else None for question, match in matches.items()},
            "augmented": sum(compose_augmented_prompt(question, book).used_reference for question in questions),
        }
    )
