"""Fixed list of symposium events offered on the registration form."""
from dataclasses import dataclass, asdict
from typing import Dict, List

TECHNICAL = "technical"
NON_TECHNICAL = "non-technical"


@dataclass(frozen=True)
class Event:
    id: str
    name: str
    category: str
    description: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


TECHNICAL_EVENTS: List[Event] = [
    Event("innovision", "Innovision – Ideathon", TECHNICAL,
          "Pitch your innovative ideas to solve real-world problems."),
    Event("paper-vista", "Paper Vista – Paper Presentation", TECHNICAL,
          "Present your research papers on emerging technologies."),
    Event("pixel-craft", "Pixel Craft – UI / UX Design", TECHNICAL,
          "Showcase your creativity in designing user-centric interfaces."),
    Event("prompt-studio", "Prompt Studio – Prompt with AI", TECHNICAL,
          "Master the art of prompt engineering with generative AI."),
    Event("hidden-hack", "The Hidden Hack – Blind Coding", TECHNICAL,
          "Code without looking at the screen. Test your muscle memory."),
    Event("mind-spark", "Mind Spark – Mind Tech", TECHNICAL,
          "A technical quiz and problem-solving challenge."),
]

NON_TECHNICAL_EVENTS: List[Event] = [
    Event("ipl-auction", "IPL Auction", NON_TECHNICAL,
          "Build your dream team in this simulated cricket auction."),
    Event("e-sports", "E-Sports", NON_TECHNICAL,
          "Compete in popular gaming titles."),
    Event("dance", "Dance", NON_TECHNICAL,
          "Express yourself through movement."),
    Event("song-composition", "Song Composition", NON_TECHNICAL,
          "Create original music and lyrics."),
    Event("connections", "Connections", NON_TECHNICAL,
          "Find the hidden links between images."),
    Event("photography", "Photography", NON_TECHNICAL,
          "Capture the world through your lens."),
    Event("tech-quiz", "Technical Quiz", NON_TECHNICAL,
          "Test your general technical knowledge."),
]
