"""Reference festival, deity, place, food and tradition records loaded on initialization."""

from __future__ import annotations

from typing import Dict, List

CULTURAL_ENTITIES: List[Dict[str, object]] = [
    # Festivals
    {
        "name": "Diwali",
        "type": "festival",
        "description": "Festival of lights celebrated across India, symbolizing the victory of light over darkness and good over evil.",
        "region": "All India",
        "language": "Sanskrit",
        "significance": "Celebrates return of Lord Rama to Ayodhya, worship of Goddess Lakshmi",
        "category": "Hindu Festival",
        "popularity": 10,
        "verified": True,
    },
    {
        "name": "Holi",
        "type": "festival",
        "description": "Festival of colors marking the arrival of spring and celebrating the victory of good over evil.",
        "region": "North India",
        "language": "Hindi",
        "significance": "Celebrates love of Radha-Krishna, burning of Holika",
        "category": "Hindu Festival",
        "popularity": 9,
        "verified": True,
    },
    {
        "name": "Eid ul-Fitr",
        "type": "festival",
        "description": "Islamic festival marking the end of Ramadan fasting month.",
        "region": "All India",
        "language": "Arabic",
        "significance": "Celebration of completion of fasting and spiritual cleansing",
        "category": "Islamic Festival",
        "popularity": 8,
        "verified": True,
    },
    {
        "name": "Durga Puja",
        "type": "festival",
        "description": "Hindu festival celebrating Goddess Durga's victory over demon Mahishasura.",
        "region": "West Bengal",
        "language": "Bengali",
        "significance": "Worship of Divine Mother, victory of good over evil",
        "category": "Hindu Festival",
        "popularity": 8,
        "verified": True,
    },
    {
        "name": "Onam",
        "type": "festival",
        "description": "Harvest festival of Kerala celebrating the return of King Mahabali.",
        "region": "Kerala",
        "language": "Malayalam",
        "significance": "Harvest celebration, remembrance of golden age under King Mahabali",
        "category": "Hindu Festival",
        "popularity": 7,
        "verified": True,
    },
    # Deities
    {
        "name": "Lakshmi",
        "type": "deity",
        "description": "Hindu goddess of wealth, fortune, prosperity, beauty and abundance.",
        "region": "All India",
        "language": "Sanskrit",
        "significance": "Patron goddess of wealth and prosperity",
        "category": "Hindu Deity",
        "popularity": 9,
        "verified": True,
    },
    {
        "name": "Ganesha",
        "type": "deity",
        "description": "Hindu deity with elephant head, remover of obstacles and patron of arts and sciences.",
        "region": "All India",
        "language": "Sanskrit",
        "significance": "Remover of obstacles, patron of beginnings",
        "category": "Hindu Deity",
        "popularity": 10,
        "verified": True,
    },
    {
        "name": "Durga",
        "type": "deity",
        "description": "Hindu goddess, divine mother, warrior goddess who protects devotees from evil.",
        "region": "All India",
        "language": "Sanskrit",
        "significance": "Divine mother, protector, destroyer of evil",
        "category": "Hindu Deity",
        "popularity": 8,
        "verified": True,
    },
    {
        "name": "Krishna",
        "type": "deity",
        "description": "Hindu deity, eighth avatar of Vishnu, known for teachings in Bhagavad Gita.",
        "region": "All India",
        "language": "Sanskrit",
        "significance": "Avatar of Vishnu, teacher of dharma",
        "category": "Hindu Deity",
        "popularity": 10,
        "verified": True,
    },
    # Places
    {
        "name": "Varanasi",
        "type": "place",
        "description": "Holy city on banks of Ganges, one of oldest continuously inhabited cities.",
        "region": "Uttar Pradesh",
        "language": "Hindi",
        "significance": "Sacred city, place of liberation, city of Shiva",
        "category": "Sacred City",
        "popularity": 9,
        "verified": True,
    },
    {
        "name": "Ayodhya",
        "type": "place",
        "description": "Sacred city, birthplace of Lord Rama according to Hindu tradition.",
        "region": "Uttar Pradesh",
        "language": "Hindi",
        "significance": "Birthplace of Rama, capital of ancient Kosala kingdom",
        "category": "Sacred City",
        "popularity": 8,
        "verified": True,
    },
    {
        "name": "Mathura",
        "type": "place",
        "description": "Birthplace of Lord Krishna, important pilgrimage site.",
        "region": "Uttar Pradesh",
        "language": "Hindi",
        "significance": "Birthplace of Krishna, sacred pilgrimage site",
        "category": "Sacred City",
        "popularity": 8,
        "verified": True,
    },
    {
        "name": "Kolkata",
        "type": "place",
        "description": "Cultural capital of India, known for Durga Puja celebrations.",
        "region": "West Bengal",
        "language": "Bengali",
        "significance": "Cultural center, literary hub, Durga Puja center",
        "category": "Cultural City",
        "popularity": 7,
        "verified": True,
    },
    # Foods
    {
        "name": "Laddu",
        "type": "food",
        "description": "Sweet ball-shaped dessert made from flour, ghee and sugar.",
        "region": "All India",
        "language": "Sanskrit",
        "significance": "Offered to deities, festival sweet",
        "category": "Sweet",
        "popularity": 9,
        "verified": True,
    },
    {
        "name": "Modak",
        "type": "food",
        "description": "Sweet dumpling, favorite food of Lord Ganesha.",
        "region": "Maharashtra",
        "language": "Marathi",
        "significance": "Ganesha's favorite sweet, offered during Ganesh Chaturthi",
        "category": "Sweet",
        "popularity": 7,
        "verified": True,
    },
    {
        "name": "Kheer",
        "type": "food",
        "description": "Rice pudding made with milk, sugar and cardamom.",
        "region": "All India",
        "language": "Hindi",
        "significance": "Festival dessert, offered in prayers",
        "category": "Sweet",
        "popularity": 8,
        "verified": True,
    },
    {
        "name": "Gujiya",
        "type": "food",
        "description": "Sweet dumpling stuffed with khoya and dry fruits, popular during Holi.",
        "region": "North India",
        "language": "Hindi",
        "significance": "Holi special sweet, symbol of celebration",
        "category": "Sweet",
        "popularity": 6,
        "verified": True,
    },
    # Traditions
    {
        "name": "Aarti",
        "type": "tradition",
        "description": "Hindu religious ritual of worship with light, usually oil lamps.",
        "region": "All India",
        "language": "Sanskrit",
        "significance": "Form of prayer, removes negative energy",
        "category": "Ritual",
        "popularity": 9,
        "verified": True,
    },
    {
        "name": "Rangoli",
        "type": "tradition",
        "description": "Art form where patterns are created on floor using colored powders.",
        "region": "All India",
        "language": "Sanskrit",
        "significance": "Welcomes prosperity, decorative art for festivals",
        "category": "Art",
        "popularity": 8,
        "verified": True,
    },
    {
        "name": "Sindoor",
        "type": "tradition",
        "description": "Red powder worn by married Hindu women in hair parting.",
        "region": "North India",
        "language": "Sanskrit",
        "significance": "Symbol of married status, protection of husband",
        "category": "Custom",
        "popularity": 7,
        "verified": True,
    },
]

# (from, to, type, strength)
_RELATIONSHIPS = [
    # Festival to deity
    ("Diwali", "Lakshmi", "WORSHIPS", 0.9),
    ("Diwali", "Ganesha", "WORSHIPS", 0.7),
    ("Holi", "Krishna", "WORSHIPS", 0.9),
    ("Durga Puja", "Durga", "WORSHIPS", 1.0),
    # Festival to place
    ("Diwali", "Ayodhya", "ORIGINATED_FROM", 0.8),
    ("Holi", "Mathura", "CELEBRATED_IN", 0.9),
    ("Durga Puja", "Kolkata", "CELEBRATED_IN", 0.9),
    # Festival to food
    ("Diwali", "Laddu", "ASSOCIATED_WITH", 0.8),
    ("Diwali", "Kheer", "ASSOCIATED_WITH", 0.7),
    ("Holi", "Gujiya", "ASSOCIATED_WITH", 0.9),
    # Festival to tradition
    ("Diwali", "Aarti", "PART_OF", 0.8),
    ("Diwali", "Rangoli", "PART_OF", 0.9),
    # Deity to food
    ("Ganesha", "Modak", "ASSOCIATED_WITH", 1.0),
    ("Lakshmi", "Kheer", "ASSOCIATED_WITH", 0.6),
    # Deity to place
    ("Krishna", "Mathura", "ORIGINATED_FROM", 1.0),
    ("Durga", "Kolkata", "CELEBRATED_IN", 0.8),
    # Cross-festival influence
    ("Diwali", "Holi", "RELATED_TO", 0.6),
    ("Durga Puja", "Diwali", "RELATED_TO", 0.5),
    ("Onam", "Diwali", "RELATED_TO", 0.4),
    # Regional variations
    ("Durga Puja", "Diwali", "VARIANT_OF", 0.3),
    ("Onam", "Diwali", "VARIANT_OF", 0.2),
]

CULTURAL_RELATIONSHIPS: List[Dict[str, object]] = [
    {
        "from_name": source,
        "to_name": target,
        "type": rel_type,
        "strength": strength,
        "context": f"Cultural relationship between {source} and {target}",
        "verified": True,
    }
    for source, target, rel_type, strength in _RELATIONSHIPS
]
