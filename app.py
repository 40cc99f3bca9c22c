#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
QR Publish - Flask Web Application

Routes:
    POST /api/upload      Store an image and return its URL and QR code
    GET  /images/<key>    Serve a stored image
    POST /api/qrcode      QR code for arbitrary text
    GET  /health          Liveness probe
"""

import logging
from datetime import datetime, timezone
from io import BytesIO

from flask import Flask, jsonify, request, send_file

from qrpublish.config import EncodeOptions, PublishSettings
from qrpublish.errors import (
    BlobNotFoundError,
    CapacityExceededError,
    EncodingFailure,
    StorageError,
    ValidationError,
)
from qrpublish.publisher import Publisher
from qrpublish.qr_generator import encode_text
from qrpublish.resolver import ResolverChain
from qrpublish.storage import FileSystemBlobStore, MemoryBlobStore, mime_type_for

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def _read_upload(req):
    """Extract the uploaded file from a multipart request."""
    file = req.files.get('file')
    if file is None or not file.filename:
        return None, None, None
    return file.read(), file.mimetype, file.filename


def _read_encode_params(req):
    """Extract the text and EncodeOptions from a JSON (or form) request."""
    values = req.get_json(silent=True)
    if not isinstance(values, dict):
        values = req.values.to_dict()
    text = (values.get('text') or values.get('url') or "")
    if not isinstance(text, str):
        raise ValidationError("text must be a string")
    return text, EncodeOptions.from_mapping(values)


def create_app(settings: PublishSettings = None, store=None) -> Flask:
    settings = settings or PublishSettings.from_env()
    if store is None:
        store = FileSystemBlobStore(settings.storage_dir) if settings.storage_dir else MemoryBlobStore()
    publisher = Publisher(store, settings)

    app = Flask(__name__)
    app.extensions['qrpublish'] = publisher

    @app.after_request
    def add_cors_headers(response):
        response.headers['Access-Control-Allow-Origin'] = '*'
        response.headers['Access-Control-Allow-Methods'] = 'GET, POST, OPTIONS'
        response.headers['Access-Control-Allow-Headers'] = 'Content-Type'
        return response

    @app.errorhandler(ValidationError)
    def handle_validation(ex):
        return jsonify({'success': False, 'error': str(ex)}), 400

    @app.errorhandler(CapacityExceededError)
    def handle_capacity(ex):
        return jsonify({'success': False, 'error': str(ex)}), 400

    @app.route('/api/upload', methods=['POST'])
    def upload():
        payload, content_type, filename = _read_upload(request)
        resolver = ResolverChain.default(settings.public_base_url, origin=request.host_url)
        try:
            result = publisher.publish(payload, content_type, filename=filename, resolver=resolver)
        except StorageError:
            return jsonify({'success': False, 'error': "Upload failed, please try again"}), 500
        return jsonify(result.to_dict())

    @app.route('/images/<key>', methods=['GET'])
    def get_image(key):
        try:
            blob = store.get(key)
        except BlobNotFoundError:
            return jsonify({'success': False, 'error': "Image not found"}), 404
        except StorageError:
            return jsonify({'success': False, 'error': "Failed to fetch image"}), 500
        response = send_file(BytesIO(blob.data), mimetype=blob.content_type or mime_type_for(key))
        response.headers['Cache-Control'] = 'public, max-age=31536000'
        return response

    @app.route('/api/qrcode', methods=['POST'])
    def qrcode():
        text, options = _read_encode_params(request)
        if not text.strip():
            raise ValidationError("Please provide the text or URL to encode")
        try:
            image = encode_text(text, options)
        except EncodingFailure as ex:
            logger.error(f"QR generation failed: {ex}")
            return jsonify({'success': False, 'error': "Failed to generate QR code"}), 500
        return jsonify({'success': True, 'image': image.to_data_url()})

    @app.route('/health', methods=['GET'])
    def health():
        return jsonify({'status': 'ok', 'timestamp': datetime.now(timezone.utc).isoformat()})

    return app


app = create_app()

if __name__ == "__main__":
    app.run(debug=True)
