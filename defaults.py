"""Compiled-in site content used when nothing better is available."""
import copy

_SERIF = '"Cormorant Garamond", serif'
_SANS = '"Montserrat", sans-serif'

INITIAL_CONTENT = {
    "theme": {
        "colors": {
            "background": "#fafaf9",
            "text": "#1c1917",
            "accent": "#292524",
            "secondary": "#78716c",
            "surface": "#ffffff",
            "testimonial_background": "#ffffff",
            "testimonial_role": "#a8a29e",
        },
        "fonts": {
            "serif": _SERIF,
            "sans": _SANS,
        },
        "font_sizes": {
            "base": "18px",
            "title": "64px",
            "subtitle": "14px",
            "caption": "16px",
        },
        "element_styles": {
            "title": {"font": _SERIF, "color": "#1c1917"},
            "subtitle": {"font": _SERIF, "color": "#78716c"},
            "text": {"font": _SERIF, "color": "#1c1917"},
            "caption": {"font": _SANS, "color": "#ffffff"},
        },
        "hero_image": "https://images.unsplash.com/photo-1464822759023-fed622ff2c3b?auto=format&fit=crop&q=80",
    },
    "home": {
        "hero_title": "A Arte de Observar",
        "hero_subtitle": "Fotografia & Poesia",
        "welcome_label": "Bem-vindo",
        "intro_title": "\"Não fotografamos o que vemos, fotografamos o que sentimos.\"",
        "intro_description": (
            "Este espaço é dedicado aos fragmentos de tempo que coleciono. Seja através da lente "
            "da câmera ou da tinta da caneta, cada obra aqui exposta é um convite para desacelerar "
            "e enxergar a beleza nos detalhes."
        ),
    },
    "portfolio_page": {
        "title": "Portfólio",
        "description": "Coleções de imagens organizadas por tema e momento.",
    },
    "writings_page": {
        "title": "Escritos",
        "description": "Crônicas, poesias e ensaios sobre o olhar e o tempo.",
    },
    "profile": {
        "name": "Pedro Henrique",
        "role": "Fotógrafo & Escritor",
        "bio": [
            "Acredito que a fotografia e a escrita são duas faces da mesma moeda: a arte de observar "
            "e eternizar o efêmero.",
            "Com 10 anos de experiência em fotografia documental e natureza, dedico minha vida a "
            "construir pontes entre o visível e o sensível.",
            "Atualmente resido em São Paulo, mas meu espírito vive na estrada.",
        ],
        "contact": {
            "email": "contato@pedrohenrique.com",
            "instagram": "@pedrohenrique.art",
            "linkedin": "linkedin.com/in/pedrohenrique",
        },
        "profile_image": "https://picsum.photos/id/64/800/800",
    },
    "albums": [
        {
            "id": "natureza-silenciosa",
            "title": "Natureza Silenciosa",
            "description": "Um estudo sobre a quietude das paisagens intocadas e a luz da manhã.",
            "date": "2023",
            "cover_image": "https://picsum.photos/id/10/800/600",
            "photos": [
                {"id": "n1", "src": "https://picsum.photos/id/10/1200/800", "alt": "Floresta ao amanhecer", "caption": "O despertar da floresta"},
                {"id": "n2", "src": "https://picsum.photos/id/11/1200/800", "alt": "Lago calmo", "caption": "Espelho d'água"},
                {"id": "n3", "src": "https://picsum.photos/id/12/1200/800", "alt": "Praia deserta", "caption": "Areias do tempo"},
                {"id": "n4", "src": "https://picsum.photos/id/13/1200/800", "alt": "Montanhas", "caption": "Horizonte distante"},
            ],
        },
        {
            "id": "cotidiano-urbano",
            "title": "Cotidiano Urbano",
            "description": "A poesia do caos nas grandes metrópoles. Preto e branco e contrastes.",
            "date": "2024",
            "cover_image": "https://picsum.photos/id/20/800/600",
            "photos": [
                {"id": "u1", "src": "https://picsum.photos/id/20/1200/800", "alt": "Mesa de trabalho", "caption": "Ferramentas do dia"},
                {"id": "u2", "src": "https://picsum.photos/id/21/1200/800", "alt": "Sapatos", "caption": "Passos apressados"},
                {"id": "u3", "src": "https://picsum.photos/id/22/1200/800", "alt": "Rua vazia", "caption": "Solidão noturna"},
            ],
        },
        {
            "id": "retratos",
            "title": "Alma & Face",
            "description": "Retratos que buscam capturar a essência além da aparência.",
            "date": "2022 - Atual",
            "cover_image": "https://picsum.photos/id/64/800/600",
            "photos": [
                {"id": "r1", "src": "https://picsum.photos/id/64/1200/800", "alt": "Retrato feminino", "caption": "Olhar sereno"},
                {"id": "r2", "src": "https://picsum.photos/id/65/1200/800", "alt": "Rosto expressivo", "caption": "Marcas do tempo"},
            ],
        },
    ],
    "writings": [
        {
            "id": "o-tempo-das-pedras",
            "title": "O Tempo das Pedras",
            "category": "Poesia",
            "date": "12 Mar 2024",
            "excerpt": "Uma reflexão poética sobre a paciência geológica e a pressa humana.",
            "cover_image": "https://picsum.photos/id/16/800/400",
            "content": (
                "<p>As pedras não têm pressa.</p>"
                "<p>Elas conhecem o segredo do repouso absoluto.</p>"
                "<p>No fim, talvez sejamos apenas poeira ansiosa, sonhando em ser rocha.</p>"
            ),
        },
        {
            "id": "cafe-frio",
            "title": "Café Frio e Memórias Mornas",
            "category": "Crônica",
            "date": "05 Fev 2024",
            "excerpt": "Sobre os encontros que não aconteceram e as xícaras que ficaram sobre a mesa.",
            "content": (
                "<p>Há uma tristeza peculiar em uma xícara de café esquecida.</p>"
                "<p>Talvez devêssemos aprender a apreciar o café morno.</p>"
            ),
        },
    ],
    "testimonials": [
        {
            "id": "t1",
            "name": "Ana Costa",
            "role": "Editora da Revista Viver",
            "text": (
                "O trabalho do Pedro captura a alma do momento. Suas fotos ilustraram nossa "
                "matéria de capa com uma sensibilidade ímpar."
            ),
            "avatar": "https://randomuser.me/api/portraits/women/44.jpg",
        }
    ],
}

SECTIONS = tuple(INITIAL_CONTENT.keys())


def initial_content() -> dict:
    return copy.deepcopy(INITIAL_CONTENT)
