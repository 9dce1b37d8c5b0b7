import os
import traceback

from flask import Flask, jsonify, request, send_file, url_for
from flask_cors import CORS
from werkzeug.exceptions import HTTPException
from werkzeug.utils import secure_filename

from container import HEADER_SIZE, MAGIC
from errors import CorruptDataError, FormatError
from File_Compression import HUFF_EXTENSION, compress_file, decompress_file

# -----------------------------------------------------------
# PATH CONFIGURATION
# -----------------------------------------------------------
BASE_DIR = os.path.abspath(os.path.dirname(__file__))
DATA_DIR = os.environ.get("HUFFPACK_DATA_DIR", os.path.join(BASE_DIR, "data"))
MAX_UPLOAD_MB = int(os.environ.get("HUFFPACK_MAX_UPLOAD_MB", "64"))

# -----------------------------------------------------------
# FLASK APP SETUP
# -----------------------------------------------------------
app = Flask(__name__)
app.config["DATA_DIR"] = DATA_DIR
app.config["MAX_CONTENT_LENGTH"] = MAX_UPLOAD_MB * 1024 * 1024
CORS(app)

# -----------------------------------------------------------
# HELPER FUNCTIONS
# -----------------------------------------------------------
def storage_dir():
    path = app.config["DATA_DIR"]
    os.makedirs(path, exist_ok=True)
    return path


def error_response(message, status):
    return jsonify({"success": False, "error": message}), status


def uploaded_file():
    """Returns (file, safe filename) for the 'file' form field, or (None, None)."""
    file = request.files.get("file")
    if not file:
        return None, None
    filename = secure_filename(file.filename or "")
    if not filename:
        return None, None
    return file, filename

@app.errorhandler(413)
def upload_too_large(e):
    return error_response(f"Upload exceeds the {app.config['MAX_CONTENT_LENGTH'] // (1024 * 1024)} MB limit", 413)

# -----------------------------------------------------------
# ROUTES
# -----------------------------------------------------------
@app.route("/")
def home():
    return jsonify({
        "service": "huffpack",
        "format": MAGIC.decode(),
        "header_size": HEADER_SIZE,
        "endpoints": {
            "compress": url_for("compress_file_route"),
            "decompress": url_for("decompress_file_route"),
        },
    })


@app.route("/compress_file", methods=["POST"])
def compress_file_route():
    try:
        file, filename = uploaded_file()
        if not file:
            return error_response("No file uploaded", 400)

        user_dir = storage_dir()
        input_path = os.path.join(user_dir, filename)
        file.save(input_path)

        # Compress file using Huffman algorithm
        compressed_filename = f"{filename}{HUFF_EXTENSION}"
        compressed_path = os.path.join(user_dir, compressed_filename)
        stats = compress_file(input_path, compressed_path)

        print(f"✅ Compressed '{filename}': {stats.original_size} → {stats.compressed_size} bytes")
        return jsonify({
            "success": True,
            "filename": filename,
            "compressed_filename": compressed_filename,
            **stats.as_dict(),
            "download_url": url_for("download_file", filename=compressed_filename),
        })

    except HTTPException:
        raise
    except Exception as e:
        print("Error in /compress_file:", e)
        traceback.print_exc()
        return error_response("Internal server error", 500)


@app.route("/decompress_file", methods=["POST"])
def decompress_file_route():
    try:
        file, filename = uploaded_file()
        if not file:
            return error_response("No file uploaded", 400)
        if not filename.endswith(HUFF_EXTENSION):
            return error_response(f"Input file must have the '{HUFF_EXTENSION}' extension", 400)

        user_dir = storage_dir()
        input_path = os.path.join(user_dir, filename)
        file.save(input_path)

        output_filename = filename[:-len(HUFF_EXTENSION)]  # keep original filename
        output_path = os.path.join(user_dir, output_filename)
        written = decompress_file(input_path, output_path)

        print(f"✅ Decompressed '{filename}' → '{output_filename}' ({written} bytes)")
        return jsonify({
            "success": True,
            "original_huff": filename,
            "decompressed_file": output_filename,
            "decompressed_size": written,
            "download_url": url_for("download_file", filename=output_filename),
        })

    except FormatError as e:
        return error_response(str(e), 400)
    except CorruptDataError as e:
        return error_response(str(e), 422)
    except HTTPException:
        raise
    except Exception as e:
        print("Error in /decompress_file:", e)
        traceback.print_exc()
        return error_response("Internal server error", 500)


@app.route("/download/<filename>")
def download_file(filename):
    file_path = os.path.join(storage_dir(), secure_filename(filename))

    if not os.path.isfile(file_path):
        return "File not found", 404

    return send_file(file_path, as_attachment=True, download_name=os.path.basename(file_path),
                     mimetype="application/octet-stream")

# -----------------------------------------------------------
if __name__ == "__main__":
    app.run(debug=True)
