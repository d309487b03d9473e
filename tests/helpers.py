import io

import requests
from PIL import Image

BLACK = (0, 0, 0, 255)
WHITE = (255, 255, 255, 255)
CLEAR_BLACK = (0, 0, 0, 0)
GRAY = (128, 128, 128, 255)
HALF_BLACK = (0, 0, 0, 100)
NEAR_WHITE = (255, 255, 254, 255)


def make_icon(pixels=(BLACK, WHITE, CLEAR_BLACK, GRAY, HALF_BLACK, NEAR_WHITE), width=3):
    height = (len(pixels) + width - 1) // width
    img = Image.new('RGBA', (width, height), (10, 20, 30, 255))
    img.putdata(list(pixels) + [(10, 20, 30, 255)] * (width * height - len(pixels)))
    return img


def png_bytes(img):
    buf = io.BytesIO()
    img.save(buf, 'PNG')
    return buf.getvalue()


def make_response(status=200, content=b'', url=''):
    response = requests.Response()
    response.status_code = status
    response._content = content
    response.url = url
    response.encoding = 'utf-8'
    response.reason = 'OK' if status < 400 else 'Not Found'
    return response


class FakeSession:
    """Stands in for requests.Session, serving canned responses by URL."""

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.calls = []
        self.headers = {}

    def get(self, url, timeout=None, **kwargs):
        self.calls.append(url)
        route = self.routes.get(url)
        if route is None:
            return make_response(404, b'', url)
        if isinstance(route, Exception):
            raise route
        if isinstance(route, bytes):
            return make_response(200, route, url)
        return route
