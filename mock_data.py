"""
Bundled catalog data

GALLERY_IMAGES is never persisted: category pages and `gallery-*` content
sections read it straight from here. SEED_PRODUCTS and SEED_CONTENT fill an
empty database on startup.
"""
import logging

from database import db, create_document

logger = logging.getLogger(__name__)

# Product category -> gallery key
GALLERY_KEYS = {
    "GraphicDesign": "graphicDesign",
    "CustomClothing": "customClothing",
    "Murals": "murals",
}

GALLERY_IMAGES = {
    "graphicDesign": [
        {
            "id": 1,
            "title": "Identidad visual Café Origen",
            "brand": "Café Origen",
            "imageUrl": "https://images.unsplash.com/photo-1561070791-2526d30994b5?q=80&w=1600&auto=format&fit=crop",
            "description": "Logotipo, paleta y papelería para una tostadora de especialidad.",
        },
        {
            "id": 2,
            "title": "Cartel Festival Raíces",
            "brand": "Festival Raíces",
            "imageUrl": "https://images.unsplash.com/photo-1626785774573-4b799315345d?q=80&w=1600&auto=format&fit=crop",
            "description": "Serie de carteles serigrafiados para la edición de verano.",
        },
        {
            "id": 3,
            "title": "Packaging Cerveza Lúpulo Negro",
            "brand": "Lúpulo Negro",
            "imageUrl": "https://images.unsplash.com/photo-1558655146-9f40138edfeb?q=80&w=1600&auto=format&fit=crop",
            "description": "Etiquetas ilustradas a mano para una línea de cervezas artesanas.",
        },
    ],
    "customClothing": [
        {
            "id": 1,
            "title": "Chaqueta vaquera pintada",
            "brand": "Negromate",
            "imageUrl": "https://images.unsplash.com/photo-1551537482-f2075a1d41f2?q=80&w=1600&auto=format&fit=crop",
            "description": "Pieza única pintada a mano con acrílico textil.",
        },
        {
            "id": 2,
            "title": "Zapatillas customizadas",
            "brand": "Negromate",
            "imageUrl": "https://images.unsplash.com/photo-1525966222134-fcfa99b8ae77?q=80&w=1600&auto=format&fit=crop",
            "description": "Diseño a medida sobre lona blanca.",
        },
    ],
    "murals": [
        {
            "id": 1,
            "title": "Mural Barrio del Carmen",
            "brand": "Ayuntamiento",
            "imageUrl": "https://images.unsplash.com/photo-1499781350541-7783f6c6a0c8?q=80&w=1600&auto=format&fit=crop",
            "description": "Fachada de 40 m² con motivos botánicos.",
        },
        {
            "id": 2,
            "title": "Interior Estudio Sol",
            "brand": "Estudio Sol",
            "imageUrl": "https://images.unsplash.com/photo-1460661419201-fd4cecdf8a8b?q=80&w=1600&auto=format&fit=crop",
            "description": "Mural interior para un estudio de yoga.",
        },
    ],
}

SEED_PRODUCTS = [
    {
        "name": "Logo Básico",
        "category": "GraphicDesign",
        "price": 150,
        "imageUrl": "https://images.unsplash.com/photo-1626785774573-4b799315345d?q=80&w=800&auto=format&fit=crop",
        "description": "Diseño de logotipo con dos propuestas y una revisión.",
        "details": ["2 propuestas", "1 revisión", "Entrega en PNG y SVG"],
    },
    {
        "name": "Identidad Completa",
        "category": "GraphicDesign",
        "price": 450,
        "imageUrl": "https://images.unsplash.com/photo-1561070791-2526d30994b5?q=80&w=800&auto=format&fit=crop",
        "description": "Logotipo, paleta de color, tipografías y manual de marca.",
        "details": ["Manual de marca", "3 revisiones", "Papelería básica"],
    },
    {
        "name": "Camiseta Personalizada",
        "category": "CustomClothing",
        "price": 35,
        "imageUrl": "https://images.unsplash.com/photo-1521572163474-6864f9cf17ab?q=80&w=800&auto=format&fit=crop",
        "description": "Camiseta de algodón orgánico pintada a mano.",
        "details": ["Algodón orgánico", "Pintura textil lavable"],
    },
    {
        "name": "Chaqueta Pintada",
        "category": "CustomClothing",
        "price": 120,
        "imageUrl": "https://images.unsplash.com/photo-1551537482-f2075a1d41f2?q=80&w=800&auto=format&fit=crop",
        "description": "Tu chaqueta vaquera convertida en pieza única.",
        "details": ["Diseño a medida", "Acabado sellado"],
    },
    {
        "name": "Mural Interior (m²)",
        "category": "Murals",
        "price": 60,
        "imageUrl": "https://images.unsplash.com/photo-1460661419201-fd4cecdf8a8b?q=80&w=800&auto=format&fit=crop",
        "description": "Precio por metro cuadrado de mural interior.",
        "details": ["Boceto previo", "Materiales incluidos"],
    },
]

SEED_CONTENT = [
    {
        "section": "hero",
        "title": "Negromate Creatives",
        "body": "Diseño gráfico, ropa personalizada y murales hechos a mano.",
    },
    {
        "section": "aboutUs",
        "title": "Sobre nosotros",
        "mainParagraph": "Somos un estudio creativo que une ilustración, diseño y arte urbano.",
        "artists": {
            "title": "Los artistas",
            "imageUrl": "https://images.unsplash.com/photo-1513364776144-60967b0f800f?q=80&w=800&auto=format&fit=crop",
            "instagram": {
                "adriana": "https://instagram.com/adriana",
                "yoel": "https://instagram.com/yoel",
            },
            "paragraphs": [
                "Adriana trabaja la ilustración y la identidad visual.",
                "Yoel pinta murales y piezas textiles desde 2012.",
            ],
        },
    },
    {
        "section": "contact",
        "title": "Contacto",
        "body": "Escríbenos para pedir presupuesto sin compromiso.",
    },
]


def gallery_for_category(category: str) -> list:
    key = GALLERY_KEYS.get(category)
    return GALLERY_IMAGES.get(key, []) if key else []


def gallery_for_section(section_name: str) -> list:
    """`gallery-murals` -> GALLERY_IMAGES["murals"]; unknown keys give []."""
    parts = section_name.split("-")
    key = parts[1] if len(parts) > 1 else ""
    return GALLERY_IMAGES.get(key, [])


def is_gallery_section(section_name: str) -> bool:
    # Any name containing "gallery" (e.g. "mygallery") is served from
    # GALLERY_IMAGES and shadows a database section of the same name.
    # The split between static and stored content is kept on purpose; see DESIGN.md.
    return "gallery" in section_name.lower()


def populate_database():
    if db is None:
        logger.warning("Database not configured; skipping seed")
        return
    if db["content"].count_documents({}) == 0:
        for doc in SEED_CONTENT:
            create_document("content", doc)
        logger.info("Seeded %d content sections", len(SEED_CONTENT))
    if db["product"].count_documents({}) == 0:
        for doc in SEED_PRODUCTS:
            create_document("product", doc)
        logger.info("Seeded %d products", len(SEED_PRODUCTS))
